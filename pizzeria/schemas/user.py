"""User Schemas — account registration, lookup, and profile edits.

Invariants:
    - UserCreate requires every profile field plus a password
    - UserUpdate requires email plus at least one field to change
"""

from typing import Annotated

from pydantic import BaseModel, StringConstraints, model_validator

from pizzeria.schemas.common import EmailField, Password

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
StreetAddress = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class UserCreate(BaseModel):
    name: Name
    email: EmailField
    street_address: StreetAddress
    password: Password


class UserLookup(BaseModel):
    email: EmailField


class UserUpdate(BaseModel):
    email: EmailField
    name: Name | None = None
    street_address: StreetAddress | None = None
    password: Password | None = None

    @model_validator(mode="after")
    def require_a_change(self):
        if self.name is None and self.street_address is None and self.password is None:
            raise ValueError("at least one of name, street_address, password is required")
        return self
