"""Dispatch Types — immutable values that flow through one render() call.

Invariants:
    - Request is frozen for the duration of dispatch
    - ResourceBinding.allowed_verbs is a non-empty subset of Verb (empty means all four)
    - AuthContext is created per request and never stored on a dispatcher
    - DispatchResult is produced exactly once per request

Design Decisions:
    - public_verbs on the binding: verbs that skip authentication entirely, the same
      way the token resource does. Empty by default so every resource is protected
      unless wiring opts in
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pizzeria.core.domain_types import ALL_VERBS, Email, TokenId, Verb


@dataclass(frozen=True)
class Request:
    """Parsed transport request. headers are expected lower-cased."""
    method: Verb
    resource_path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResourceBinding:
    """Resource name plus the verbs a dispatcher accepts for it."""
    resource: str
    allowed_verbs: frozenset[Verb] = ALL_VERBS
    public_verbs: frozenset[Verb] = frozenset()

    def __post_init__(self):
        allowed = frozenset(Verb(v) for v in self.allowed_verbs) or ALL_VERBS
        public = frozenset(Verb(v) for v in self.public_verbs)
        if not public <= allowed:
            raise ValueError(
                f"public verbs {sorted(v.value for v in public - allowed)} "
                f"are not allowed on '{self.resource}'"
            )
        object.__setattr__(self, "allowed_verbs", allowed)
        object.__setattr__(self, "public_verbs", public)

    def allows(self, verb: Verb) -> bool:
        return verb in self.allowed_verbs


@dataclass(frozen=True)
class AuthContext:
    """Caller identity resolved by the authorizer. Any field may be empty."""
    email: Email | None = None
    token_id: TokenId | None = None
    user: Mapping[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


@dataclass(frozen=True)
class DispatchResult:
    """Status code plus optional body handed to the respond callback."""
    status_code: int
    body: Mapping[str, Any] | list | None = None
