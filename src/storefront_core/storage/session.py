"""
storefront_core.storage.session

SQLAlchemy engine + session factory helpers for the SQL-backed store.

Responsibilities:
- Create the engine from settings.
- Create the sessionmaker with safe defaults.
- Create tables on first use.
"""

from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.orm import Session, sessionmaker

from storefront_core.settings import Settings
from storefront_core.storage.base import Base
from storefront_core.storage import models  # noqa: F401  (registers tables on Base.metadata)


def create_engine(settings: Settings) -> Engine:
    return sa_create_engine(settings.storage_url, pool_pre_ping=True)


def create_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    # expire_on_commit=False lets values be read after the write transaction closes.
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def init_storage(engine: Engine) -> None:
    """
    Create the storage table if it doesn't exist. There is a single table, so no
    migration tooling is involved.
    """

    Base.metadata.create_all(engine)


# --- Module Notes -----------------------------------------------------------
# Writes are synchronous on purpose: cart mutations persist before they return.
