"""
storefront_core.observability.hooks

httpx event hooks for outbound request context.

Responsibilities:
- Ensure every outbound request carries an `x-request-id`.
- Emit debug log lines for requests and responses with the same id.
"""

from __future__ import annotations

import uuid

import httpx

from storefront_core.observability.logging import get_logger

log = get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


async def _on_request(request: httpx.Request) -> None:
    # Prefer a caller-provided id for trace continuity; otherwise generate one.
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.headers[REQUEST_ID_HEADER] = request_id
    log.debug(
        "http.request",
        method=request.method,
        path=request.url.path,
        request_id=request_id,
    )


async def _on_response(response: httpx.Response) -> None:
    log.debug(
        "http.response",
        method=response.request.method,
        path=response.request.url.path,
        status=response.status_code,
        request_id=response.request.headers.get(REQUEST_ID_HEADER),
    )


def request_context_hooks() -> dict[str, list]:
    return {"request": [_on_request], "response": [_on_response]}


# --- Module Notes -----------------------------------------------------------
# Installed by `storefront_core.clients.http.create_http_client`.
