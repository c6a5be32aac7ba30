"""
storefront_core.auth.models

Auth domain models.

Responsibilities:
- `Principal` and its admin/customer variants, parsed from backend JSON.
- `SessionStatus` for the session store state machine.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SessionStatus(enum.StrEnum):
    unauthenticated = "UNAUTHENTICATED"
    validating = "VALIDATING"
    authenticated = "AUTHENTICATED"


class Principal(BaseModel):
    """
    Authenticated identity. `provisional=True` marks data shown from the local cache
    that the backend has not confirmed yet.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    email: str = ""
    status: str | None = None

    # Kept out of the persisted record: the token has its own storage key.
    token: str | None = Field(default=None, exclude=True)
    provisional: bool = Field(default=False, exclude=True)

    @property
    def display_name(self) -> str:
        return self.email

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def _field_for(cls, key: str) -> str | None:
        for name, info in cls.model_fields.items():
            if key == name or key == info.serialization_alias:
                return name
        return None

    def merged(self, partial: Mapping[str, Any]) -> Principal:
        """
        Return a copy with `partial` applied. Keys may use backend (camelCase) or
        Python names; unknown keys are ignored and the token is never replaced.
        """

        updates: dict[str, Any] = {}
        for key, value in partial.items():
            name = self._field_for(key)
            if name is not None and name not in ("token", "provisional"):
                updates[name] = value

        merged = type(self).model_validate({**self.model_dump(), **updates})
        return merged.model_copy(update={"token": self.token, "provisional": self.provisional})


class AdminPrincipal(Principal):
    name: str = ""
    role: str = "admin"
    permissions: list[str] = Field(default_factory=list)
    store_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("storeId", "store_id"),
        serialization_alias="storeId",
    )
    store_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("storeName", "store_name"),
        serialization_alias="storeName",
    )

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def has_permission(self, permission: str) -> bool:
        return self.role == "super_admin" or permission in self.permissions


class CustomerPrincipal(Principal):
    first_name: str = Field(
        default="",
        validation_alias=AliasChoices("firstName", "first_name"),
        serialization_alias="firstName",
    )
    last_name: str = Field(
        default="",
        validation_alias=AliasChoices("lastName", "last_name"),
        serialization_alias="lastName",
    )
    phone: str | None = None
    addresses: list[dict[str, Any]] = Field(default_factory=list)
    store_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("storeId", "store_id"),
        serialization_alias="storeId",
    )

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.email

    def default_address(self) -> dict[str, Any] | None:
        for address in self.addresses:
            if address.get("isDefault"):
                return address
        return self.addresses[0] if self.addresses else None


# --- Module Notes -----------------------------------------------------------
# Records are persisted with backend field names so older cached entries still parse.
