"""Outcome Mapping — one table from ModelOutcome to (status, body) shared by all verbs.

Invariants:
    - All functions are PURE
    - Reserved tags inside InternalError are reclassified first:
      "already exists" -> Conflict, "not found on disk" -> NotFound
    - InternalError tags never appear in a response body
    - A read that succeeds with no entity is 404; any other empty success is 200

Design Decisions:
    - Dict keyed by outcome type over four per-verb code paths: adding an outcome
      kind means editing one table
"""

from pizzeria.core.dispatch_types import DispatchResult
from pizzeria.core.domain_types import ALREADY_EXISTS, NOT_FOUND_ON_DISK, Verb
from pizzeria.core.outcomes import (
    Conflict,
    InternalError,
    ModelOutcome,
    NotFound,
    Success,
    ValidationFailed,
)

DEFAULT_CONFLICT_MESSAGE = "That entity already exists."


def classify_outcome(
    outcome: ModelOutcome, conflict_message: str | None = None,
) -> ModelOutcome:
    """Turn reserved InternalError tags into Conflict / NotFound."""
    if isinstance(outcome, InternalError):
        if ALREADY_EXISTS in outcome.tags:
            return Conflict(conflict_message)
        if NOT_FOUND_ON_DISK in outcome.tags:
            return NotFound()
    if isinstance(outcome, Conflict) and outcome.message is None:
        return Conflict(conflict_message)
    return outcome


def _map_success(outcome: Success, verb: Verb) -> DispatchResult:
    if outcome.entity is not None:
        return DispatchResult(200, outcome.entity)
    if verb == Verb.READ:
        return DispatchResult(404)
    return DispatchResult(200)


_OUTCOME_TABLE = {
    Success: _map_success,
    ValidationFailed: lambda o, v: DispatchResult(400, {"Errors": list(o.tags)}),
    Conflict: lambda o, v: DispatchResult(
        400, {"Error": o.message or DEFAULT_CONFLICT_MESSAGE},
    ),
    NotFound: lambda o, v: DispatchResult(404),
    InternalError: lambda o, v: DispatchResult(500),
}


def map_outcome(
    verb: Verb, outcome: ModelOutcome, conflict_message: str | None = None,
) -> DispatchResult:
    """Classify, then look up the response for the outcome's type."""
    outcome = classify_outcome(outcome, conflict_message)
    return _OUTCOME_TABLE[type(outcome)](outcome, verb)


def map_invalid_model(errors: list[str]) -> DispatchResult:
    """Model rejected its input at construction time."""
    return _OUTCOME_TABLE[ValidationFailed](ValidationFailed(tuple(errors)), None)
