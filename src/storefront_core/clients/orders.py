"""
storefront_core.clients.orders

Order endpoints shared by the storefront (customer) and the dashboard (admin).
"""

from __future__ import annotations

from typing import Any

from storefront_core.clients.http import ApiClient
from storefront_core.clients.pagination import Page

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")


class OrdersClient:
    def __init__(self, *, api: ApiClient) -> None:
        self._api = api

    async def create(self, order: dict[str, Any]) -> dict[str, Any]:
        return await self._api.post("/orders", json=order)

    async def list(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        store_id: str | None = None,
    ) -> Page:
        payload = await self._api.get(
            "/orders",
            params={"page": page, "limit": limit, "status": status, "storeId": store_id},
        )
        return Page.from_payload(payload, items_key="orders")

    async def get(self, order_id: str) -> dict[str, Any]:
        return await self._api.get(f"/orders/{order_id}")

    async def cancel(self, order_id: str) -> dict[str, Any]:
        return await self._api.put(f"/orders/{order_id}/cancel")

    async def update_status(self, order_id: str, status: str) -> dict[str, Any]:
        if status not in ORDER_STATUSES:
            raise ValueError(f"unknown order status: {status}")
        return await self._api.put(f"/orders/{order_id}/status", json={"status": status})
