"""
storefront_core.storage

Durable client storage package.

Responsibilities:
- Narrow key/value capability shared by the cart, tenant and session stores.
- In-memory and SQLAlchemy-backed implementations.
"""

from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.memory import InMemoryKeyValueStore
from storefront_core.storage.repository import SqlKeyValueStore

__all__ = ["KeyValueStore", "InMemoryKeyValueStore", "SqlKeyValueStore"]
