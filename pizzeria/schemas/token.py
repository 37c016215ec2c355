"""Token Schemas — login, lookup, and expiry extension."""

from typing import Annotated, Literal

from pydantic import BaseModel, StringConstraints

from pizzeria.schemas.common import EmailField, NonBlank

TOKEN_LENGTH = 20

TokenIdField = Annotated[
    str, StringConstraints(
        strip_whitespace=True, min_length=TOKEN_LENGTH, max_length=TOKEN_LENGTH,
        pattern=r"^[A-Za-z0-9]+$",
    ),
]


class TokenCreate(BaseModel):
    email: EmailField
    password: NonBlank


class TokenLookup(BaseModel):
    id: TokenIdField


class TokenExtend(BaseModel):
    id: TokenIdField
    extend: Literal[True]
