"""Boundary Protocols — contracts between the dispatcher core and the domain models.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - A DomainModel validates in __init__; only the verb matching its intent is called
    - valid is False iff errors is non-empty
    - Every verb operation returns a ModelOutcome and never raises for domain failures

Design Decisions:
    - Protocol over ABC: structural subtyping, so test fakes need no inheritance
    - Async verb operations: implementations do IO, but the decisions around them
      (core/enforce_auth.py, core/map_outcome.py) stay synchronous and pure
"""

from typing import Any, Callable, Mapping, Optional, Protocol

from pizzeria.core.domain_types import EpochMillis, Verb
from pizzeria.core.outcomes import ModelOutcome

# Wall-clock source in epoch milliseconds.
Clock = Callable[[], EpochMillis]

# respond(status_code, optional_body): invoked exactly once per request.
Respond = Callable[[int, Optional[Any]], None]


class DomainModel(Protocol):
    """Structural contract every resource model satisfies."""
    valid: bool
    errors: list[str]
    conflict_message: str | None

    async def create(self) -> ModelOutcome: ...
    async def read(self) -> ModelOutcome: ...
    async def update(self) -> ModelOutcome: ...
    async def delete(self) -> ModelOutcome: ...


class ModelFactory(Protocol):
    """Builds a DomainModel for one intent over one input mapping.

    db is the open storage session (an AsyncSession in the application).
    """
    def __call__(
        self, verb: Verb, data: Mapping[str, Any], db: Any,
    ) -> DomainModel: ...
