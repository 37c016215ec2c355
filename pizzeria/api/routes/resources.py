"""Resource Routes — the HTTP edge for every dispatched resource.

Invariants:
    - POST/GET/PUT/DELETE on /api/v1/{resource} map to create/read/update/delete
    - Unknown resource names return 404 without touching a dispatcher
    - The response is exactly what the dispatcher's respond callback received;
      an empty body is sent as {}
    - A body that is not a JSON object is rejected with 400 before dispatch

Design Decisions:
    - get_dispatchers is a cached FastAPI dependency so tests can override it
      with dispatchers bound to a controllable clock
"""

import json
import logging
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends, Request as HTTPRequest, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.config import get_settings
from pizzeria.core.dispatch_types import Request
from pizzeria.core.domain_types import Verb
from pizzeria.infrastructure.database import get_db
from pizzeria.services.dispatcher import Dispatcher
from pizzeria.services.resource_bindings import build_application_dispatchers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["resources"])


class MalformedBodyError(ValueError):
    pass


@lru_cache
def get_dispatchers() -> dict[str, Dispatcher]:
    return build_application_dispatchers(get_settings())


async def parse_request(resource: str, http_request: HTTPRequest) -> Request:
    """Transport request -> immutable dispatch Request."""
    raw = await http_request.body()
    payload: Any = {}
    if raw.strip():
        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise MalformedBodyError(f"invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise MalformedBodyError("body must be a JSON object")
    return Request(
        method=Verb.from_http_method(http_request.method),
        resource_path=resource,
        headers={k.lower(): v for k, v in http_request.headers.items()},
        query=dict(http_request.query_params),
        payload=payload,
    )


@router.api_route("/{resource}", methods=["POST", "GET", "PUT", "DELETE"])
async def dispatch_resource(
    resource: str,
    http_request: HTTPRequest,
    db: AsyncSession = Depends(get_db),
    dispatchers: dict[str, Dispatcher] = Depends(get_dispatchers),
):
    """Hand the request to the resource's dispatcher and relay its response."""
    dispatcher = dispatchers.get(resource)
    if dispatcher is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"Error": f"Resource '{resource}' does not exist"},
        )
    try:
        request = await parse_request(resource, http_request)
    except MalformedBodyError as e:
        logger.info(f"Malformed body on {resource}: {e}", extra={"resource": resource})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"Error": "Request body must be a JSON object"},
        )

    sent: list[tuple[int, Any]] = []
    await dispatcher.render(request, lambda code, body=None: sent.append((code, body)), db)
    status_code, body = sent[0]
    return JSONResponse(
        status_code=status_code, content=body if body is not None else {},
    )
