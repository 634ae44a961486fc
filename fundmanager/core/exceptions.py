"""
Domain exceptions and global exception handlers.

The service layer raises the exceptions below without importing FastAPI.
``FundManager`` turns backend and validation failures into status messages,
so only routing-level problems (an unknown row id, a malformed form post,
an unexpected bug) reach the handlers, which answer with::

    {
        "error": true,
        "message": "<human-readable description>"
    }
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────
# Domain exceptions
# ────────────────────────────────────────────────────────────────────────────


class AppException(Exception):
    """Base exception for all application-level errors."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundException(AppException):
    """Resource not found (404)."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=404,
            message=f"{resource} with id '{identifier}' not found",
        )


class FormValidationError(AppException):
    """The fund form draft was rejected before any backend call (422)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(status_code=422, message=message, details={"field": field})
        self.field = field


class BackendCallFailed(AppException):
    """
    A call to the fund backend failed (502).

    Covers every failure mode alike: unreachable host, non-2xx status and a
    body that does not parse into the expected shape.
    """

    def __init__(self, operation: str, reason: str, status_code: Optional[int] = None):
        super().__init__(
            status_code=502,
            message=f"Backend call '{operation}' failed: {reason}",
            details={"backend_status": status_code},
        )
        self.operation = operation
        self.reason = reason
        self.backend_status = status_code


# ────────────────────────────────────────────────────────────────────────────
# FastAPI exception handler registration
# ────────────────────────────────────────────────────────────────────────────


def add_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI application instance."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle domain-specific exceptions raised below the routes."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "message": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle standard HTTP exceptions (e.g. 404 from path-not-found)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "message": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed requests, e.g. a non-numeric id in an Edit/Delete path."""
        errors = []
        for err in exc.errors():
            loc = " -> ".join(str(part) for part in err["loc"])
            errors.append({"field": loc, "message": err["msg"]})
        return JSONResponse(
            status_code=422,
            content={"error": True, "message": "Validation failed", "details": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected exceptions."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": True,
                "message": "Internal Server Error. Please contact support.",
            },
        )
