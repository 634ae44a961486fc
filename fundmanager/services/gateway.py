"""
Backend gateway: the only module that talks HTTP to the fund backend.

Each method maps to one backend route under ``{FUND_API_URL}/fundapi``::

    GET    /all            list_all()
    POST   /add            add(payload)
    PUT    /update         update(payload)
    DELETE /delete/{id}    delete(fund_id)
    GET    /get/{id}       get(fund_id)

Every failure (payload that does not encode, transport error, non-2xx
status, body that does not parse) is raised as :class:`BackendCallFailed`.
No retries, and no timeout beyond httpx's default.
"""

import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from fundmanager.core.config import settings
from fundmanager.core.exceptions import BackendCallFailed
from fundmanager.middleware import REQUEST_ID_HEADER, current_request_id
from fundmanager.schemas.fund import Fund

logger = logging.getLogger(__name__)

_FUND_LIST = TypeAdapter(List[Fund])


async def _forward_request_id(request: httpx.Request) -> None:
    """httpx request hook: tag backend calls with the browser request's ID."""
    request_id = current_request_id()
    if request_id and REQUEST_ID_HEADER not in request.headers:
        request.headers[REQUEST_ID_HEADER] = request_id


def build_backend_client(
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared async client for the backend (caller closes it)."""
    return httpx.AsyncClient(
        base_url=base_url or settings.FUND_API_BASE_URL,
        transport=transport,
        follow_redirects=True,
        event_hooks={"request": [_forward_request_id]},
    )


def _delete_message(response: httpx.Response) -> str:
    """
    Extract the message a delete call answered with.

    Plain text is returned verbatim; a JSON string is unwrapped and a JSON
    object's ``message`` is used when present.  Other JSON falls back to the
    raw body text.
    """
    text = response.text
    if "json" not in response.headers.get("content-type", ""):
        return text
    try:
        body = response.json()
    except ValueError:
        return text
    if isinstance(body, str):
        return body
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return text


class FundGateway:
    """Thin async wrapper over the backend's five fund routes."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            request = self._client.build_request(method, path, json=payload)
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Backend call %s %s not sent, payload does not encode: %s",
                method,
                path,
                exc,
                extra={"operation": operation, "method": method},
            )
            raise BackendCallFailed(operation, f"unencodable payload: {exc}") from exc

        start = time.perf_counter()
        try:
            response = await self._client.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(
                "Backend call %s %s failed with HTTP %d",
                method,
                exc.request.url,
                status,
                extra={"operation": operation, "method": method, "status_code": status},
            )
            raise BackendCallFailed(operation, f"HTTP {status}", status) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Backend call %s %s failed: %s: %s",
                method,
                path,
                type(exc).__name__,
                exc,
                extra={"operation": operation, "method": method},
            )
            raise BackendCallFailed(operation, f"{type(exc).__name__}: {exc}") from exc

        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "%s %s -> %d (%.2fms)",
            method,
            response.request.url,
            response.status_code,
            elapsed_ms,
            extra={
                "operation": operation,
                "method": method,
                "url": str(response.request.url),
                "status_code": response.status_code,
                "elapsed_ms": elapsed_ms,
            },
        )
        return response

    async def list_all(self) -> List[Fund]:
        response = await self._send("list_all", "GET", "/all")
        try:
            return _FUND_LIST.validate_python(response.json())
        except ValueError as exc:
            logger.warning("Malformed fund list from backend: %s", exc)
            raise BackendCallFailed("list_all", "malformed response", response.status_code) from exc

    async def add(self, payload: Dict[str, Any]) -> None:
        await self._send("add", "POST", "/add", payload)

    async def update(self, payload: Dict[str, Any]) -> None:
        await self._send("update", "PUT", "/update", payload)

    async def delete(self, fund_id: Any) -> str:
        """Delete one fund; returns the backend's message (possibly empty)."""
        response = await self._send("delete", "DELETE", f"/delete/{quote(str(fund_id), safe='')}")
        return _delete_message(response)

    async def get(self, fund_id: Any) -> Fund:
        """Fetch one fund; the id is sent as a single path segment, as typed."""
        response = await self._send("get", "GET", f"/get/{quote(str(fund_id), safe='')}")
        try:
            return Fund.from_backend(response.json())
        except ValueError as exc:
            logger.warning("Malformed fund from backend: %s", exc)
            raise BackendCallFailed("get", "malformed response", response.status_code) from exc
