"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Verb has exactly 4 members; HTTP methods map onto them one-to-one
    - Caller identity (AuthContext, token claim checks) is typed TokenId / Email,
      and token instants are EpochMillis
    - Reserved error tags are the only strings the dispatcher interprets

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TokenId = NewType("TokenId", str)
Email = NewType("Email", str)
EpochMillis = NewType("EpochMillis", int)


# ─── Reserved Error Tags ─────────────────────────────────────────

ALREADY_EXISTS = "already exists"
NOT_FOUND_ON_DISK = "not found on disk"


# ─── Enums ───────────────────────────────────────────────────────

class Verb(str, Enum):
    """CRUD operation intent a domain model is constructed for."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def from_http_method(cls, method: str) -> "Verb | None":
        """POST/GET/PUT/DELETE -> Verb. Unknown methods return None."""
        return _HTTP_METHODS.get(method.upper())


ALL_VERBS = frozenset(Verb)

# Verbs whose input comes from the body; the rest read the query string.
PAYLOAD_VERBS = frozenset({Verb.CREATE, Verb.UPDATE})

_HTTP_METHODS = {
    "POST": Verb.CREATE,
    "GET": Verb.READ,
    "PUT": Verb.UPDATE,
    "DELETE": Verb.DELETE,
}


class ResourceName(str, Enum):
    """Resources exposed by the default application wiring."""
    USERS = "users"
    TOKENS = "tokens"
    MENU = "menu"
    CARTS = "carts"
