"""Menu Model — read-only access to the catalogue.

Invariants:
    - read with an id returns that item or nothing (404)
    - read without an id returns every item ordered by id, possibly an empty list
"""

from sqlalchemy import select

from pizzeria.core.domain_types import Verb
from pizzeria.core.outcomes import ModelOutcome, Success
from pizzeria.models.menu_item import MenuItem
from pizzeria.schemas.menu import MenuLookup
from pizzeria.services.resource_model import ResourceModel


class MenuModel(ResourceModel):
    schemas = {Verb.READ: MenuLookup}

    async def _read(self) -> ModelOutcome:
        if self.input.id is not None:
            item = await self.db.get(MenuItem, self.input.id)
            return Success(item.to_entity() if item else None)
        result = await self.db.execute(select(MenuItem).order_by(MenuItem.id))
        return Success([item.to_entity() for item in result.scalars().all()])
