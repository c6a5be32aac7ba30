"""
storefront_core.auth.session

Session / identity store shared by the dashboard and the storefront.

Responsibilities:
- Validate a cached token once at startup (cache-then-verify, one retry on transient errors).
- Login, signup, logout and profile updates, mirrored into durable storage.
- Follow the HTTP client's "session expired" signal instead of deciding on 401s itself.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from storefront_core.auth.jwt import token_expired
from storefront_core.auth.models import Principal, SessionStatus
from storefront_core.auth.profiles import PrincipalProfile
from storefront_core.clients.errors import ApiError, is_auth_error, message_from_payload
from storefront_core.clients.http import ApiClient
from storefront_core.observability.logging import get_logger
from storefront_core.settings import Settings
from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.keys import TOKEN_KEY, clear_identity

log = get_logger(__name__)

# Transient failures during startup validation are retried this many times.
VALIDATION_RETRIES = 1


class LoginError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(Exception):
    pass


class SessionStore:
    def __init__(
        self,
        *,
        api: ApiClient,
        storage: KeyValueStore,
        profile: PrincipalProfile,
        settings: Settings,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._api = api
        self._storage = storage
        self._profile = profile
        self._settings = settings
        self._sleep = sleep

        self.status = SessionStatus.unauthenticated
        self.principal: Principal | None = None
        self.error: str | None = None

        self._validated = False
        self._closed = False
        # Bumped on every login/logout/expiry; in-flight validation results from an
        # older generation are discarded.
        self._generation = 0
        self._unsubscribe = api.on_unauthenticated(self._on_unauthenticated)

    @property
    def profile(self) -> PrincipalProfile:
        return self._profile

    @property
    def is_authenticated(self) -> bool:
        return (
            self.status is SessionStatus.authenticated
            and self.principal is not None
            and not self.principal.provisional
        )

    # ---------------------------------------------------------------- startup

    async def startup_validate(self, *, force: bool = False) -> SessionStatus:
        """
        Confirm the cached session with the backend. Runs once per load unless forced.

        - no cached token (or missing required keys): unauthenticated
        - backend confirms: authenticated with server fields, cached token kept
        - 401 / locally expired token: session expired (credentials cleared)
        - anything else: retried once, then the provisional cached state is kept
        """

        if self._validated and not force:
            return self.status
        self._validated = True

        token = self._storage.get(TOKEN_KEY)
        if not token or not self._profile.has_required_keys(self._storage):
            clear_identity(self._storage)
            self._set_unauthenticated()
            return self.status

        if token_expired(token):
            self._api.expire_session(reason="token_expired")
            return self.status

        generation = self._generation
        cached = self._profile.load_principal(self._storage)
        self.status = SessionStatus.validating
        self.principal = (
            cached.model_copy(update={"token": token, "provisional": True}) if cached else None
        )
        log.info("session.validating", kind=self._profile.kind, cached=cached is not None)

        attempt = 0
        while True:
            try:
                payload = await self._api.get(self._profile.profile_path)
                break
            except ApiError as e:
                if self._stale(generation):
                    return self.status
                if is_auth_error(e):
                    # ApiClient already expired the session through `_on_unauthenticated`.
                    return self.status
                if attempt < VALIDATION_RETRIES:
                    attempt += 1
                    log.warning("session.validate_retry", status=e.status, message=e.message)
                    await self._sleep(self._settings.session_retry_delay_seconds)
                    if self._stale(generation):
                        return self.status
                    continue
                log.warning("session.validate_unconfirmed", status=e.status, message=e.message)
                self.error = e.message
                return self.status

        if self._stale(generation):
            return self.status

        try:
            if not payload:
                raise ValueError("empty profile response")
            principal = self._profile.principal_from_profile(payload)
        except (ValueError, TypeError):
            self._api.expire_session(reason="invalid_profile")
            return self.status

        self._set_authenticated(principal.model_copy(update={"token": token, "provisional": False}))
        log.info("session.validated", kind=self._profile.kind, principal_id=principal.id)
        return self.status

    # ---------------------------------------------------------------- actions

    async def login(self, email: str, password: str, *, store_name: str | None = None) -> Principal:
        body = self._profile.login_body(email, password, store_name)
        try:
            payload = await self._api.post(self._profile.login_path, json=body, expire_on_401=False)
        except ApiError as e:
            message = message_from_payload(e.payload, self._profile.login_fallback_message)
            self.error = message
            log.info("session.login_failed", kind=self._profile.kind, status=e.status)
            raise LoginError(message) from e

        return self._accept_grant(payload, event="session.logged_in")

    async def signup(self, data: dict[str, Any]) -> Principal:
        if self._profile.signup_path is None:
            raise LoginError(f"{self._profile.kind} accounts cannot sign up")
        try:
            payload = await self._api.post(self._profile.signup_path, json=data, expire_on_401=False)
        except ApiError as e:
            message = message_from_payload(e.payload, "Signup failed")
            self.error = message
            raise LoginError(message) from e

        return self._accept_grant(payload, event="session.signed_up")

    def logout(self) -> None:
        clear_identity(self._storage)
        self._set_unauthenticated()
        log.info("session.logged_out", kind=self._profile.kind)

    def update_profile(self, partial: dict[str, Any]) -> Principal:
        """
        Merge `partial` into the current principal locally and persist it.
        """

        if not self.is_authenticated or self.principal is None:
            raise NotAuthenticatedError("update_profile requires an authenticated session")

        self.principal = self.principal.merged(partial)
        self._profile.save_principal(self._storage, self.principal)
        return self.principal

    async def save_profile(self, data: dict[str, Any]) -> Principal:
        if not self.is_authenticated:
            raise NotAuthenticatedError("save_profile requires an authenticated session")
        payload = await self._api.put(self._profile.profile_path, json=data)
        return self.update_profile(self._profile.profile_fields(payload))

    async def change_password(self, current_password: str, new_password: str) -> Any:
        if not self.is_authenticated:
            raise NotAuthenticatedError("change_password requires an authenticated session")
        return await self._api.put(
            self._profile.password_path,
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    def close(self) -> None:
        self._closed = True
        self._unsubscribe()

    # ---------------------------------------------------------------- internals

    def _accept_grant(self, payload: Any, *, event: str) -> Principal:
        try:
            grant = self._profile.parse_grant(payload)
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            self.error = "Invalid response from server"
            raise LoginError(self.error) from e

        # Stale identity from an earlier session (including legacy keys) must not survive.
        clear_identity(self._storage)
        self._profile.persist_grant(self._storage, grant)
        self._set_authenticated(grant.principal, persist=False)
        log.info(event, kind=self._profile.kind, principal_id=grant.principal.id)
        return grant.principal

    def _set_authenticated(self, principal: Principal, *, persist: bool = True) -> None:
        self._generation += 1
        self.principal = principal
        self.status = SessionStatus.authenticated
        self.error = None
        if persist:
            self._profile.save_principal(self._storage, principal)

    def _set_unauthenticated(self) -> None:
        self._generation += 1
        self.principal = None
        self.status = SessionStatus.unauthenticated

    def _on_unauthenticated(self, reason: str) -> None:
        if self._closed:
            return
        log.info("session.unauthenticated", kind=self._profile.kind, reason=reason)
        self._set_unauthenticated()

    def _stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation


# --- Module Notes -----------------------------------------------------------
# Auth errors end the session; every other failure keeps what is cached. A flaky
# connection at startup therefore never logs anyone out.
