"""
storefront_core.storage.models

Persistence schema for durable client storage.

Responsibilities:
- One row per storage key; the value is the owner-encoded JSON string.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront_core.storage.base import Base


def _utcnow() -> datetime:
    return datetime.utcnow()


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Keys are flat and globally unique; ownership is documented in `storage.keys`.
