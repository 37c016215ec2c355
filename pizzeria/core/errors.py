"""Error Hierarchy — typed, categorized failures for dispatch and authorization.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the caller-visible body: {"Error": message}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with PizzeriaError base: FastAPI global handler catches all
    - Authorization failures are returned as values by core/enforce_auth.py and only
      raised at the transport edge, so the dispatcher never unwinds mid-request
    - Missing token is 400 while invalid/mismatched/expired is 403: the split is kept
      as callers observe it today
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    CONFIGURATION = "configuration"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource: str | None = None
    verb: str | None = None
    email: str | None = None
    debug_info: dict[str, Any] | None = None


class PizzeriaError(Exception):
    """Base exception for all Pizzeria errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Caller-visible body. Code and category stay server-side."""
        return {"Error": self.message}

    def to_log_extra(self) -> dict:
        """Structured fields for the JSON log formatter."""
        return {
            "error_code": self.code,
            "resource": self.context.resource,
            "verb": self.context.verb,
        }


# ─── Authentication / Authorization Errors (400/403) ────────────

class MissingTokenError(PizzeriaError):
    """Request carries no token header for a protected resource."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You must provide a token in the headers of the request.",
            "MISSING_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class InvalidTokenError(PizzeriaError):
    """Token header does not resolve to a stored token."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "The provided token is not valid.",
            "INVALID_TOKEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ForbiddenError(PizzeriaError):
    """Token exists but belongs to a different identity."""
    def __init__(
        self,
        context: ErrorContext | None = None,
        message: str = "You are not authorized to access this resource.",
        code: str = "FORBIDDEN",
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class TokenExpiredError(ForbiddenError):
    """Token exists but its expiry instant has passed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(context, "Token has expired", "TOKEN_EXPIRED")


class MethodNotAllowedError(PizzeriaError):
    """Verb not in the resource binding's allowed set."""
    def __init__(self, verb: str, resource: str, context: ErrorContext | None = None):
        super().__init__(
            f"Method '{verb}' is not allowed on '{resource}'",
            "METHOD_NOT_ALLOWED", ErrorCategory.METHOD_NOT_ALLOWED,
            ErrorSeverity.INFO, context, 405,
        )


# ─── Configuration / Infrastructure Errors (500-level) ──────────

class UnknownResourceError(PizzeriaError):
    """Resource name has no registered model factory."""
    def __init__(self, resource: str, context: ErrorContext | None = None):
        super().__init__(
            f"No model registered for resource '{resource}'",
            "UNKNOWN_RESOURCE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.resource = resource


class DatabaseError(PizzeriaError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
