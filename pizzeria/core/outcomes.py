"""Model Outcomes — the single result vocabulary every domain model operation returns.

Invariants:
    - Every verb operation returns exactly one of the five outcome types
    - Outcomes are frozen: the dispatcher never mutates what a model returned
    - Error tags are carried as tuples so outcomes stay hashable and comparable

Design Decisions:
    - Frozen dataclasses over exceptions: model failures are data, never faults,
      so the error path is identical in shape to the success path
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    """Operation completed. entity is None for writes and for reads that found nothing."""
    entity: Any = None


@dataclass(frozen=True)
class ValidationFailed:
    """Input rejected by the model. tags are caller-visible."""
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class NotFound:
    """Target entity does not exist."""


@dataclass(frozen=True)
class Conflict:
    """Entity already exists. message is the domain-specific caller-visible text."""
    message: str | None = None


@dataclass(frozen=True)
class InternalError:
    """Model or storage failure. tags are logged server-side, never returned."""
    tags: tuple[str, ...] = field(default_factory=tuple)


ModelOutcome = Union[Success, ValidationFailed, NotFound, Conflict, InternalError]
