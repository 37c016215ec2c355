"""Error Handlers — global exception handlers for the Pizzeria API.

Invariants:
    - PizzeriaError -> {"Error": message} with the error's http_status
    - RequestValidationError -> 400 with field-level error tags
    - Exception (catch-all) -> 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (PizzeriaError), validation (Pydantic), catch-all
    - Same body shape as dispatcher responses so clients parse one format
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from pizzeria.core.errors import PizzeriaError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_pizzeria_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_pizzeria_error_handler(app: FastAPI) -> None:

    @app.exception_handler(PizzeriaError)
    async def pizzeria_error_handler(request: Request, exc: PizzeriaError):
        """Handle all Pizzeria domain/infrastructure errors."""
        logger.error(
            f"PizzeriaError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"Error": "An unexpected error occurred"},
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "Errors": [
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
            for e in exc.errors()
        ],
    }
