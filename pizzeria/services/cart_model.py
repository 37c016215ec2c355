"""Cart Model — one whole-cart document per user.

Invariants:
    - Every line references an existing menu item, otherwise ValidationFailed
    - create on an existing cart -> "already exists"; update/delete of a missing
      cart -> "not found on disk"
    - Reads price lines from the current menu; lines whose item was removed are dropped

Design Decisions:
    - Whole-cart writes (update replaces items) over per-line patching: the client
      always holds the full cart
"""

from sqlalchemy import select

from pizzeria.core.domain_types import ALREADY_EXISTS, NOT_FOUND_ON_DISK, Verb
from pizzeria.core.outcomes import (
    InternalError, ModelOutcome, Success, ValidationFailed,
)
from pizzeria.models.cart import Cart
from pizzeria.models.menu_item import MenuItem
from pizzeria.models.user import User
from pizzeria.schemas.cart import CartLookup, CartWrite
from pizzeria.services.resource_model import ResourceModel

NO_ACCOUNT = "no account exists for that email address"


class CartModel(ResourceModel):
    """Shopping carts keyed by the owner's email."""

    schemas = {
        Verb.CREATE: CartWrite,
        Verb.READ: CartLookup,
        Verb.UPDATE: CartWrite,
        Verb.DELETE: CartLookup,
    }
    conflict_message = "A cart already exists for that email address."

    async def _create(self) -> ModelOutcome:
        if await self.db.get(Cart, self.input.email) is not None:
            return InternalError((ALREADY_EXISTS,))
        if await self.db.get(User, self.input.email) is None:
            return ValidationFailed((NO_ACCOUNT,))
        problems = await self._unknown_menu_items()
        if problems:
            return ValidationFailed(problems)
        self.db.add(Cart(email=self.input.email, items=self._lines()))
        await self.db.commit()
        return Success()

    async def _read(self) -> ModelOutcome:
        cart = await self.db.get(Cart, self.input.email)
        if cart is None:
            return Success(None)
        ids = [line["menu_item_id"] for line in cart.items]
        menu = await self._menu_items(ids)
        lines = []
        for line in cart.items:
            item = menu.get(line["menu_item_id"])
            if item is None:
                continue
            lines.append({
                "menu_item_id": item.id,
                "name": item.name,
                "quantity": line["quantity"],
                "unit_price_cents": item.price_cents,
                "line_total_cents": item.price_cents * line["quantity"],
            })
        return Success({
            "email": cart.email,
            "items": lines,
            "total_cents": sum(line["line_total_cents"] for line in lines),
        })

    async def _update(self) -> ModelOutcome:
        cart = await self.db.get(Cart, self.input.email)
        if cart is None:
            return InternalError((NOT_FOUND_ON_DISK,))
        problems = await self._unknown_menu_items()
        if problems:
            return ValidationFailed(problems)
        cart.items = self._lines()
        await self.db.commit()
        return Success()

    async def _delete(self) -> ModelOutcome:
        cart = await self.db.get(Cart, self.input.email)
        if cart is None:
            return InternalError((NOT_FOUND_ON_DISK,))
        await self.db.delete(cart)
        await self.db.commit()
        return Success()

    def _lines(self) -> list[dict]:
        return [line.model_dump() for line in self.input.items]

    async def _menu_items(self, ids: list[int]) -> dict[int, MenuItem]:
        if not ids:
            return {}
        result = await self.db.execute(
            select(MenuItem).where(MenuItem.id.in_(ids)),
        )
        return {item.id: item for item in result.scalars().all()}

    async def _unknown_menu_items(self) -> tuple[str, ...]:
        ids = [line.menu_item_id for line in self.input.items]
        known = await self._menu_items(ids)
        return tuple(
            f"menu item {menu_id} does not exist"
            for menu_id in ids if menu_id not in known
        )
