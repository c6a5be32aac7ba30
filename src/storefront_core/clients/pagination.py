"""
storefront_core.clients.pagination

Paginated list responses (`{<items>: [...], page, pages, total}`).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Page(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
    page: int = 1
    pages: int = 1
    total: int = 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @classmethod
    def from_payload(cls, payload: Any, *, items_key: str) -> Page:
        # Some endpoints return a bare list instead of a page envelope.
        if isinstance(payload, list):
            return cls(items=payload, page=1, pages=1, total=len(payload))

        payload = payload or {}
        items = payload.get(items_key) or []
        return cls(
            items=items,
            page=int(payload.get("page") or 1),
            pages=int(payload.get("pages", 1) or 0),
            total=int(payload.get("total") or len(items)),
        )
