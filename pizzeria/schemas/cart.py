"""Cart Schemas — whole-cart writes and lookup.

Invariants:
    - A cart write has 1-50 lines, each with quantity 1-50
    - A menu item appears at most once per cart
"""

from pydantic import BaseModel, Field, field_validator

from pizzeria.schemas.common import EmailField

MAX_LINES = 50
MAX_QUANTITY = 50


class CartLine(BaseModel):
    menu_item_id: int = Field(ge=1)
    quantity: int = Field(ge=1, le=MAX_QUANTITY)


class CartWrite(BaseModel):
    email: EmailField
    items: list[CartLine] = Field(min_length=1, max_length=MAX_LINES)

    @field_validator("items")
    @classmethod
    def unique_menu_items(cls, v: list[CartLine]) -> list[CartLine]:
        ids = [line.menu_item_id for line in v]
        if len(ids) != len(set(ids)):
            raise ValueError("each menu item may appear only once")
        return v


class CartLookup(BaseModel):
    email: EmailField
