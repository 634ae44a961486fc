"""
Custom middleware for request tracing and timing.

Provides:
- **Request ID injection**: every browser request/response carries a trace ID
  (``X-Request-ID`` header).  The ID is also published through a context
  variable so the backend gateway can forward it and log records can carry it.
- **Request timing**: logs wall-clock duration of every request.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Header name used for request tracing, both inbound and towards the backend.
REQUEST_ID_HEADER = "X-Request-ID"

_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def current_request_id() -> Optional[str]:
    """Request ID of the browser request being handled, if any."""
    return _request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Injects a unique request ID into every request/response cycle.

    - An incoming ``X-Request-ID`` header is reused; otherwise a UUID4 is
      generated.
    - The ID is stored on ``request.state.request_id`` and in a context
      variable read by :func:`current_request_id`.
    - The ID is echoed back in the response ``X-Request-ID`` header.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = _request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Logs the wall-clock duration of every HTTP request.

    Page renders are cheap; anything slow is almost always a slow backend
    call, so requests over 500ms are logged at WARNING.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}ms"

        if elapsed_ms > 500:
            logger.warning(
                "%s %s completed in %.2fms (SLOW)",
                request.method,
                request.url.path,
                elapsed_ms,
            )
        else:
            logger.debug(
                "%s %s completed in %.2fms",
                request.method,
                request.url.path,
                elapsed_ms,
            )

        return response
