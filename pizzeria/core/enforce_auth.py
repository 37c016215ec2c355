"""Authorization Enforcement — pure decisions over a request and a stored token.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no clock reads
    - Return a PizzeriaError on violation, None on success
    - A missing token never reaches the expiry comparison
    - A token is usable only while expires > now (strict)
    - An expired token reports TOKEN_EXPIRED even when the email also mismatches

Design Decisions:
    - Errors as return values (not raised): the dispatcher turns them into a
      response without unwinding, keeping the error path identical to success
    - now_ms passed in by the caller so it is read once per authorization pass
"""

from typing import Any, Mapping

from pizzeria.core.dispatch_types import Request
from pizzeria.core.domain_types import Email, EpochMillis
from pizzeria.core.errors import (
    ErrorContext,
    ForbiddenError,
    InvalidTokenError,
    MissingTokenError,
    PizzeriaError,
    TokenExpiredError,
)

TOKEN_HEADER = "token"


def resolve_claimed_email(request: Request) -> Email | None:
    """Body email wins over query email when the key is present."""
    if "email" in request.payload:
        return request.payload["email"]
    return request.query.get("email")


def check_token_present(
    request: Request, context: ErrorContext | None = None,
) -> PizzeriaError | None:
    """Protected resources need a non-empty token header."""
    if not request.headers.get(TOKEN_HEADER):
        return MissingTokenError(context)
    return None


def check_token_claim(
    token: Mapping[str, Any] | None,
    claimed_email: Email | None,
    now_ms: EpochMillis,
    context: ErrorContext | None = None,
) -> PizzeriaError | None:
    """Token must exist, be unexpired, and belong to the claimed email."""
    if token is None:
        return InvalidTokenError(context)
    if not token["expires"] > now_ms:
        return TokenExpiredError(context)
    if claimed_email is None or token["email"] != claimed_email:
        return ForbiddenError(context)
    return None
