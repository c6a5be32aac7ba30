"""
storefront_core.clients.resources

Generic CRUD client used by the dashboard forms (categories, products, coupons, ...).
"""

from __future__ import annotations

from typing import Any

from storefront_core.clients.http import ApiClient
from storefront_core.clients.pagination import Page


class ResourceClient:
    def __init__(self, *, api: ApiClient, path: str, items_key: str) -> None:
        self._api = api
        self._path = "/" + path.strip("/")
        self._items_key = items_key

    async def list(self, *, page: int = 1, limit: int = 10, **filters: Any) -> Page:
        payload = await self._api.get(
            self._path, params={"page": page, "limit": limit, **filters}
        )
        return Page.from_payload(payload, items_key=self._items_key)

    async def get(self, resource_id: str) -> dict[str, Any]:
        return await self._api.get(f"{self._path}/{resource_id}")

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._api.post(self._path, json=data)

    async def update(self, resource_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._api.put(f"{self._path}/{resource_id}", json=data)

    async def delete(self, resource_id: str) -> Any:
        return await self._api.delete(f"{self._path}/{resource_id}")
