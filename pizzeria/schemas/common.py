"""Shared field types for resource schemas."""

from typing import Annotated

from pydantic import Field, StringConstraints

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

EmailField = Annotated[
    str, StringConstraints(max_length=254, pattern=EMAIL_PATTERN),
]
NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Password = Annotated[str, Field(min_length=8, max_length=128)]
