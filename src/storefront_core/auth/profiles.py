"""
storefront_core.auth.profiles

Endpoint + storage profiles for the two principal kinds.

Responsibilities:
- Name the login/profile/password endpoints per kind.
- Parse login responses into an `AuthGrant`.
- Write a grant to durable storage.
"""

from __future__ import annotations

import abc
import json
from dataclasses import dataclass
from typing import Any, ClassVar

from storefront_core.auth.models import AdminPrincipal, CustomerPrincipal, Principal
from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.keys import (
    ADMIN_KEY,
    CUSTOMER_KEY,
    STORE_ID_KEY,
    STORE_NAME_KEY,
    TOKEN_KEY,
)


@dataclass(frozen=True, slots=True)
class AuthGrant:
    token: str
    principal: Principal
    store_id: str | None = None
    store_name: str | None = None


class PrincipalProfile(abc.ABC):
    kind: ClassVar[str]
    principal_type: ClassVar[type[Principal]]
    principal_key: ClassVar[str]
    login_path: ClassVar[str]
    profile_path: ClassVar[str]
    password_path: ClassVar[str]
    signup_path: ClassVar[str | None] = None
    required_keys: ClassVar[tuple[str, ...]] = (TOKEN_KEY,)
    login_fallback_message: ClassVar[str] = "Login failed"

    def login_body(self, email: str, password: str, store_name: str | None) -> dict[str, Any]:
        return {"email": email, "password": password}

    @abc.abstractmethod
    def parse_grant(self, payload: Any) -> AuthGrant:
        """Turn a login/signup response into an `AuthGrant`."""

    def principal_from_profile(self, payload: Any) -> Principal:
        return self.principal_type.model_validate(payload)

    def profile_fields(self, payload: Any) -> dict[str, Any]:
        """Fields of a profile-update response that describe the principal."""
        return dict(payload or {})

    def has_required_keys(self, storage: KeyValueStore) -> bool:
        return all(storage.get(key) for key in self.required_keys)

    def load_principal(self, storage: KeyValueStore) -> Principal | None:
        raw = storage.get(self.principal_key)
        if not raw:
            return None
        try:
            return self.principal_type.model_validate(json.loads(raw))
        except ValueError:
            # pydantic.ValidationError and json.JSONDecodeError are both ValueErrors.
            return None

    def save_principal(self, storage: KeyValueStore, principal: Principal) -> None:
        storage.set(self.principal_key, json.dumps(principal.to_record()))

    def persist_grant(self, storage: KeyValueStore, grant: AuthGrant) -> None:
        storage.set(TOKEN_KEY, grant.token)
        self.save_principal(storage, grant.principal)
        if grant.store_id:
            storage.set(STORE_ID_KEY, grant.store_id)
        if grant.store_name:
            storage.set(STORE_NAME_KEY, grant.store_name)


class AdminProfile(PrincipalProfile):
    kind = "admin"
    principal_type = AdminPrincipal
    principal_key = ADMIN_KEY
    login_path = "/admin/login"
    profile_path = "/admin/profile"
    password_path = "/admin/profile/password"
    login_fallback_message = "Invalid credentials"

    def parse_grant(self, payload: Any) -> AuthGrant:
        # The admin login response is the admin record with the token inlined.
        token = payload["token"]
        if not token:
            raise KeyError("token")
        principal = AdminPrincipal.model_validate(payload)
        return AuthGrant(token=token, principal=principal.model_copy(update={"token": token}))


class CustomerProfile(PrincipalProfile):
    kind = "customer"
    principal_type = CustomerPrincipal
    principal_key = CUSTOMER_KEY
    login_path = "/customer/auth/login"
    profile_path = "/customer/auth/profile"
    password_path = "/customer/auth/change-password"
    signup_path = "/customer/auth/signup"
    required_keys = (TOKEN_KEY, STORE_ID_KEY, STORE_NAME_KEY)

    def login_body(self, email: str, password: str, store_name: str | None) -> dict[str, Any]:
        body: dict[str, Any] = {"email": email, "password": password}
        if store_name:
            body["storeName"] = store_name
        return body

    def parse_grant(self, payload: Any) -> AuthGrant:
        token = payload["token"]
        if not token:
            raise KeyError("token")
        store = payload.get("store") or {}
        store_id = store.get("id") or store.get("_id")
        principal = CustomerPrincipal.model_validate(payload["customer"])
        return AuthGrant(
            token=token,
            principal=principal.model_copy(update={"token": token}),
            store_id=str(store_id) if store_id else None,
            store_name=store.get("name"),
        )

    def profile_fields(self, payload: Any) -> dict[str, Any]:
        payload = payload or {}
        return dict(payload.get("customer") or payload)


ADMIN = AdminProfile()
CUSTOMER = CustomerProfile()


# --- Module Notes -----------------------------------------------------------
# Both kinds share the `token` key so the HTTP client can attach it without knowing
# which application it runs in.
