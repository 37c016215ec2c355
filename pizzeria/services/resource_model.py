"""Resource Model Base — shared construction, validation, and storage guarding.

Invariants:
    - Input is validated in __init__ against the schema registered for the intent
    - valid is False iff errors is non-empty
    - A verb with no registered schema makes the model invalid (never reaches storage)
    - Calling a verb other than the construction intent returns InternalError
    - Storage exceptions never escape a verb: IntegrityError -> "already exists",
      any other SQLAlchemyError -> InternalError, both after a rollback

Design Decisions:
    - One base class with four thin public verbs delegating to _create/_read/...:
      subclasses only write the storage logic, never the guarding
    - Validation tags follow the "<field>: <message>" shape used in API error bodies
"""

import logging
from typing import Any, Awaitable, Callable, Mapping

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.core.domain_types import ALREADY_EXISTS, Verb
from pizzeria.core.outcomes import InternalError, ModelOutcome

logger = logging.getLogger(__name__)


def validation_tags(exc: ValidationError) -> list[str]:
    """Flatten a Pydantic ValidationError into caller-visible tags."""
    tags = []
    for e in exc.errors():
        field = ".".join(str(loc) for loc in e["loc"])
        tags.append(f"{field}: {e['msg']}" if field else e["msg"])
    return tags


class ResourceModel:
    """Base for domain models: validates on construction, runs one verb."""

    schemas: dict[Verb, type[BaseModel]] = {}
    conflict_message: str | None = None

    def __init__(self, verb: Verb, data: Mapping[str, Any], db: AsyncSession):
        self.verb = Verb(verb)
        self.db = db
        self.errors: list[str] = []
        self.input: Any = None

        schema = self.schemas.get(self.verb)
        if schema is None:
            self.errors.append(f"{self.verb.value} is not supported")
            return
        try:
            self.input = schema.model_validate(dict(data))
        except ValidationError as e:
            self.errors.extend(validation_tags(e))

    @property
    def valid(self) -> bool:
        return not self.errors

    async def create(self) -> ModelOutcome:
        return await self._guarded(Verb.CREATE, self._create)

    async def read(self) -> ModelOutcome:
        return await self._guarded(Verb.READ, self._read)

    async def update(self) -> ModelOutcome:
        return await self._guarded(Verb.UPDATE, self._update)

    async def delete(self) -> ModelOutcome:
        return await self._guarded(Verb.DELETE, self._delete)

    async def _create(self) -> ModelOutcome:
        return InternalError(("create is not implemented",))

    async def _read(self) -> ModelOutcome:
        return InternalError(("read is not implemented",))

    async def _update(self) -> ModelOutcome:
        return InternalError(("update is not implemented",))

    async def _delete(self) -> ModelOutcome:
        return InternalError(("delete is not implemented",))

    async def _guarded(
        self, verb: Verb, operation: Callable[[], Awaitable[ModelOutcome]],
    ) -> ModelOutcome:
        if verb != self.verb:
            return InternalError((
                f"{verb.value} called on a model built for {self.verb.value}",
            ))
        if not self.valid:
            return InternalError(tuple(self.errors))
        try:
            return await operation()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"{type(self).__name__}.{verb.value} integrity error: {e}")
            return InternalError((ALREADY_EXISTS,))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"{type(self).__name__}.{verb.value} storage error: {e}",
                exc_info=True,
            )
            return InternalError((f"storage error: {type(e).__name__}",))
