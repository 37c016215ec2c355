"""Authorizer — resolves the caller for one request before any CRUD handler runs.

Invariants:
    - The token resource, and verbs a binding marks public, skip token checks
    - Token is read through the token model's read operation, never the ORM directly
    - The clock is read exactly once per authorize() call
    - Best-effort user lookup never fails the request: errors are logged and the
      AuthContext is returned without a user
    - Returns (AuthContext, error); error is None when authorized

Design Decisions:
    - Decisions delegated to core/enforce_auth.py (pure); this class only does IO
    - No per-request state on self: safe to share across concurrent requests
"""

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.core.dispatch_types import AuthContext, Request, ResourceBinding
from pizzeria.core.domain_types import Email, ResourceName, TokenId, Verb
from pizzeria.core.enforce_auth import (
    TOKEN_HEADER,
    check_token_claim,
    check_token_present,
    resolve_claimed_email,
)
from pizzeria.core.errors import ErrorContext, PizzeriaError
from pizzeria.core.outcomes import Success
from pizzeria.core.repository_protocols import Clock
from pizzeria.infrastructure.clock import now_ms
from pizzeria.services.model_registry import ModelRegistry

logger = logging.getLogger(__name__)


class Authorizer:
    """Token-based caller authentication shared by every dispatcher."""

    def __init__(
        self,
        registry: ModelRegistry,
        token_resource: str = ResourceName.TOKENS.value,
        user_resource: str = ResourceName.USERS.value,
        clock: Clock = now_ms,
    ):
        self.token_resource = token_resource
        self._token_factory = registry.resolve(token_resource)
        self._user_factory = registry.resolve(user_resource)
        self._clock = clock

    def is_exempt(self, request: Request, binding: ResourceBinding) -> bool:
        return (
            binding.resource == self.token_resource
            or request.method in binding.public_verbs
        )

    async def authorize(
        self, request: Request, binding: ResourceBinding, db: AsyncSession,
    ) -> tuple[AuthContext, PizzeriaError | None]:
        claimed_email = resolve_claimed_email(request)
        context = ErrorContext(
            resource=binding.resource, verb=request.method.value, email=claimed_email,
        )
        if self.is_exempt(request, binding):
            return AuthContext(email=claimed_email), None

        error = check_token_present(request, context)
        if error:
            return AuthContext(email=claimed_email), error

        token_id = TokenId(request.headers[TOKEN_HEADER])
        token = await self._read_token(token_id, db)
        error = check_token_claim(token, claimed_email, self._clock(), context)
        if error:
            return AuthContext(email=claimed_email), error

        user = await self._load_user(claimed_email, db)
        return AuthContext(email=claimed_email, token_id=token_id, user=user), None

    async def _read_token(
        self, token_id: TokenId, db: AsyncSession,
    ) -> Mapping[str, Any] | None:
        model = self._token_factory(Verb.READ, {"id": token_id}, db)
        if not model.valid:
            return None
        outcome = await model.read()
        if isinstance(outcome, Success):
            return outcome.entity
        logger.warning(
            f"Token lookup failed: {outcome}",
            extra={"resource": self.token_resource},
        )
        return None

    async def _load_user(
        self, email: Email, db: AsyncSession,
    ) -> Mapping[str, Any] | None:
        """Best-effort: a missing or failing user read only degrades the context."""
        try:
            model = self._user_factory(Verb.READ, {"email": email}, db)
            if not model.valid:
                logger.warning(f"User lookup rejected: {model.errors}", extra={"email": email})
                return None
            outcome = await model.read()
        except Exception as e:
            logger.warning(f"User lookup failed: {e}", extra={"email": email})
            return None
        if isinstance(outcome, Success) and outcome.entity is not None:
            return outcome.entity
        logger.warning(f"User lookup found nothing: {outcome}", extra={"email": email})
        return None
