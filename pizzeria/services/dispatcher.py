"""Dispatcher — method check, authorization, and one generic CRUD handler per resource.

Invariants:
    - respond() is called exactly once per render(), on every path
    - A verb outside the binding's allowed set yields 405 before any model is built
    - An authorization failure yields its 400/403 before any model is built
    - An invalid model yields 400 with its error list; the verb is never invoked
    - Model outcomes map to responses through core/map_outcome.py only
    - InternalError tags are logged, never returned
    - No per-request state on self; AuthContext is passed into the handler

Design Decisions:
    - Explicit verb -> operation dict over getattr(model, verb): every mapping
      visible in one place
    - dispatch() computes a DispatchResult and render() responds once at the end,
      so no branch can forget or repeat the callback
    - Unexpected exceptions from the token lookup or a model are caught here and
      become 500: the request-handling process never crashes on a storage error
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.core.dispatch_types import (
    AuthContext, DispatchResult, Request, ResourceBinding,
)
from pizzeria.core.domain_types import PAYLOAD_VERBS, Verb
from pizzeria.core.errors import ErrorContext, MethodNotAllowedError
from pizzeria.core.map_outcome import classify_outcome, map_invalid_model, map_outcome
from pizzeria.core.outcomes import InternalError
from pizzeria.core.repository_protocols import Respond
from pizzeria.services.authorizer import Authorizer
from pizzeria.services.model_registry import ModelRegistry

logger = logging.getLogger(__name__)

_OPERATIONS = {
    Verb.CREATE: lambda model: model.create(),
    Verb.READ: lambda model: model.read(),
    Verb.UPDATE: lambda model: model.update(),
    Verb.DELETE: lambda model: model.delete(),
}


class Dispatcher:
    """Routes requests for one resource binding to its domain model."""

    def __init__(
        self,
        binding: ResourceBinding,
        registry: ModelRegistry,
        authorizer: Authorizer,
    ):
        self.binding = binding
        self._factory = registry.resolve(binding.resource)
        self._authorizer = authorizer

    async def render(
        self, request: Request, respond: Respond, db: AsyncSession,
    ) -> DispatchResult:
        """Dispatch and hand the result to respond exactly once."""
        result = await self.dispatch(request, db)
        respond(result.status_code, result.body)
        return result

    async def dispatch(self, request: Request, db: AsyncSession) -> DispatchResult:
        verb = request.method
        resource = self.binding.resource

        if not self.binding.allows(verb):
            error = MethodNotAllowedError(
                verb.value, resource, ErrorContext(resource=resource, verb=verb.value),
            )
            logger.info(error.message, extra={**error.to_log_extra(), "status_code": 405})
            return DispatchResult(405)

        try:
            auth, error = await self._authorizer.authorize(request, self.binding, db)
            if error:
                logger.info(
                    f"Rejected {verb.value} on {resource}: {error.message}",
                    extra={**error.to_log_extra(), "status_code": error.http_status},
                )
                return DispatchResult(error.http_status, error.to_response())
            return await self._handle(verb, request, auth, db)
        except Exception as e:
            logger.error(
                f"Unhandled error on {verb.value} {resource}: {e}",
                exc_info=True,
                extra={"resource": resource, "verb": verb.value, "status_code": 500},
            )
            return DispatchResult(500)

    async def _handle(
        self, verb: Verb, request: Request, auth: AuthContext, db: AsyncSession,
    ) -> DispatchResult:
        data = request.payload if verb in PAYLOAD_VERBS else request.query
        model = self._factory(verb, data, db)
        if not model.valid:
            return map_invalid_model(model.errors)

        outcome = classify_outcome(
            await _OPERATIONS[verb](model), model.conflict_message,
        )
        if isinstance(outcome, InternalError):
            logger.error(
                f"{self.binding.resource} {verb.value} failed",
                extra={
                    "resource": self.binding.resource,
                    "verb": verb.value,
                    "email": auth.email,
                    "tags": list(outcome.tags),
                    "status_code": 500,
                },
            )
        return map_outcome(verb, outcome, model.conflict_message)
