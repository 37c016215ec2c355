"""Menu Schemas — lookup of one item or the whole catalogue."""

from pydantic import BaseModel, Field


class MenuLookup(BaseModel):
    id: int | None = Field(None, ge=1)
