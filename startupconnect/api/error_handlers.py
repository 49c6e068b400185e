"""
startupconnect.api.error_handlers — Exception → JSON error envelope
=====================================================================

Every error leaves the API as ``{"error": {"code", "message", ...}}``:

* :class:`StartupConnectError` → its own ``http_status`` and ``to_response()``
* request body / query validation → 400 with per-field details
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from startupconnect.errors import StartupConnectError, StoreUnavailable

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the global error handlers on *app*."""

    @app.exception_handler(StartupConnectError)
    async def domain_error_handler(request: Request, exc: StartupConnectError):
        if isinstance(exc, StoreUnavailable):
            logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
        else:
            logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_validation_response(exc),
        )


def _validation_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "validation_error",
            "message": "Invalid request data",
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                }
                for e in exc.errors()
            ],
        },
    }
