"""
storefront_core.storage.repository

SQL-backed `KeyValueStore`.

Responsibilities:
- get/set/remove single keys, one short transaction per call.
"""

from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from storefront_core.storage.models import StorageEntry


class SqlKeyValueStore:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        engine: Engine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    def get(self, key: str) -> str | None:
        with self._session_factory() as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory.begin() as session:
            entry = session.get(StorageEntry, key)
            if entry is None:
                session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value

    def remove(self, key: str) -> None:
        with self._session_factory.begin() as session:
            entry = session.get(StorageEntry, key)
            if entry is not None:
                session.delete(entry)

    def close(self) -> None:
        # Dispose the engine to close pooled connections/file handles.
        if self._engine is not None:
            self._engine.dispose()


# --- Module Notes -----------------------------------------------------------
# Each call commits independently; no cross-key transaction is offered or needed.
