"""
storefront_core.storage.keys

Durable storage key names and their owners.

- cart store:      CART_KEY
- tenant resolver: TENANT_KEY
- session store:   TOKEN_KEY, ADMIN_KEY, CUSTOMER_KEY, STORE_ID_KEY, STORE_NAME_KEY
                   (+ LEGACY_IDENTITY_KEYS, only ever removed)
"""

from __future__ import annotations

from storefront_core.storage.base import KeyValueStore

CART_KEY = "cartItems"

TENANT_KEY = "currentStore"

TOKEN_KEY = "token"
ADMIN_KEY = "admin"
CUSTOMER_KEY = "customer"
STORE_ID_KEY = "storeId"
STORE_NAME_KEY = "storeName"

# Written by older builds of the dashboard and storefront; cleared on every login/logout.
LEGACY_IDENTITY_KEYS: tuple[str, ...] = (
    "authToken",
    "auth-token",
    "auth-storage",
    "auth-state",
    "userInfo",
    "user",
)

IDENTITY_KEYS: tuple[str, ...] = (
    TOKEN_KEY,
    ADMIN_KEY,
    CUSTOMER_KEY,
    STORE_ID_KEY,
    STORE_NAME_KEY,
    *LEGACY_IDENTITY_KEYS,
)


def clear_identity(storage: KeyValueStore) -> None:
    for key in IDENTITY_KEYS:
        storage.remove(key)
