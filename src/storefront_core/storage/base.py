"""
storefront_core.storage.base

Storage contracts.

Responsibilities:
- Define the `KeyValueStore` protocol every durable store implements.
- Provide the SQLAlchemy declarative base for the SQL-backed store.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


@runtime_checkable
class KeyValueStore(Protocol):
    """
    String-in, string-out persistence. Callers own the encoding of their values.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


# --- Module Notes -----------------------------------------------------------
# Components receive a `KeyValueStore` instead of reaching for ambient global state,
# so each one can be tested against `InMemoryKeyValueStore`.
