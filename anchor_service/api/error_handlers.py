"""Error Handlers: global exception handlers mapping every failure to a JSON envelope.

Invariants:
    - AnchorServiceError -> its own status and envelope (generic for 500-level)
    - RequestValidationError -> 400 with field-level details
    - Exception (catch-all) -> 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (AnchorServiceError), validation (Pydantic), catch-all
    - Extracted from main.py so tests can build a bare app with the same mapping
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from anchor_service.core.errors import (
    AnchorServiceError, ErrorSeverity, GENERIC_FAILURE_MESSAGE,
    InvariantViolationError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_service_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_service_error_handler(app: FastAPI) -> None:

    @app.exception_handler(AnchorServiceError)
    async def service_error_handler(request: Request, exc: AnchorServiceError):
        """Handle all classified domain/storage errors."""
        _log_for(exc)(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "anchor_id": exc.context.anchor_id,
                "account_reference": exc.context.account_reference,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _log_for(exc: AnchorServiceError):
    """Integrity faults are critical, other 500s errors, caller mistakes info."""
    if isinstance(exc, InvariantViolationError):
        return logger.critical
    return logger.error if exc.is_internal else logger.info


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
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": GENERIC_FAILURE_MESSAGE,
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
