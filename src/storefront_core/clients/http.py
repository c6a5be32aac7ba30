"""
storefront_core.clients.http

HTTP client wrapper used by every store to call the backend.

Responsibilities:
- Attach the bearer token and tenant-scoping header from durable storage.
- Normalize every failure into `ApiError` (status 0 when no usable response arrived).
- Own the single "session is invalid" policy: on 401, clear identity keys, notify
  subscribers and redirect to the login view.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from storefront_core.clients.errors import (
    NETWORK_ERROR_STATUS,
    ApiError,
    is_auth_error,
    message_from_payload,
)
from storefront_core.clients.navigation import Navigator
from storefront_core.observability.hooks import request_context_hooks
from storefront_core.observability.logging import get_logger
from storefront_core.settings import Settings
from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.keys import STORE_ID_KEY, TOKEN_KEY, clear_identity

log = get_logger(__name__)

UnauthenticatedListener = Callable[[str], None]


def create_http_client(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout_seconds,
        transport=transport,
        event_hooks=request_context_hooks(),
    )


class ApiClient:
    def __init__(
        self,
        *,
        settings: Settings,
        http: httpx.AsyncClient,
        storage: KeyValueStore,
        navigator: Navigator | None = None,
    ) -> None:
        self._settings = settings
        self._http = http
        self._storage = storage
        self._navigator = navigator
        self._listeners: list[UnauthenticatedListener] = []

    def on_unauthenticated(self, listener: UnauthenticatedListener) -> Callable[[], None]:
        """
        Subscribe to session expiry. Returns a callable that removes the subscription.
        """

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}

        token = self._storage.get(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        # The backend reads this header as a store id, never a slug or display name.
        tenant = self._storage.get(STORE_ID_KEY)
        if tenant:
            headers[self._settings.tenant_header] = tenant

        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        expire_on_401: bool = True,
    ) -> Any:
        """
        Perform a request and return the decoded JSON body (None for an empty body).

        `expire_on_401=False` is used by credential exchanges (login/signup), where a 401
        means "wrong password" rather than "session expired".
        """

        clean_params = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            response = await self._http.request(
                method,
                path,
                params=clean_params or None,
                json=json,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            log.warning("http.transport_error", method=method, path=path, error=str(e))
            raise ApiError(str(e) or "Network error", NETWORK_ERROR_STATUS) from e

        payload: Any = None
        if response.content:
            try:
                payload = response.json()
            except ValueError as e:
                if response.is_success:
                    log.warning("http.invalid_body", method=method, path=path)
                    raise ApiError("Invalid response from server", NETWORK_ERROR_STATUS) from e

        if response.is_success:
            return payload

        fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
        err = ApiError(
            message_from_payload(payload, fallback),
            response.status_code,
            payload=payload,
        )
        log.info("http.error", method=method, path=path, status=err.status, message=err.message)

        if expire_on_401 and is_auth_error(err):
            self.expire_session(reason="http_401")
        raise err

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None, expire_on_401: bool = True) -> Any:
        return await self.request("POST", path, json=json, expire_on_401=expire_on_401)

    async def put(self, path: str, *, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def expire_session(self, *, reason: str) -> None:
        # Clearing is idempotent and the redirect is skipped once on the login view,
        # so repeated expiries (e.g. parallel 401s) converge on the same state.
        clear_identity(self._storage)
        log.info("session.expired", reason=reason)

        for listener in list(self._listeners):
            listener(reason)

        if self._navigator is not None and self._navigator.current_path != self._settings.login_path:
            self._navigator.redirect(self._settings.login_path)

    async def aclose(self) -> None:
        await self._http.aclose()


# --- Module Notes -----------------------------------------------------------
# The session store subscribes through `on_unauthenticated` instead of deciding on 401s
# itself, so there is exactly one place that clears credentials and redirects.
