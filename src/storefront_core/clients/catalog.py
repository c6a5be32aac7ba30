"""
storefront_core.clients.catalog

Public, tenant-scoped catalog endpoints.

Responsibilities:
- Categories, product listings (optionally by category), product detail and search.
- Scope every call with `store=<tenant name>`.
"""

from __future__ import annotations

from typing import Any

from storefront_core.clients.http import ApiClient
from storefront_core.clients.pagination import Page
from storefront_core.tenancy.models import Tenant


class CatalogClient:
    def __init__(self, *, api: ApiClient) -> None:
        self._api = api

    async def categories(self, *, tenant: Tenant) -> list[dict[str, Any]]:
        payload = await self._api.get("/categories/public", params={"store": tenant.name})
        return Page.from_payload(payload, items_key="categories").items

    async def products(
        self,
        *,
        tenant: Tenant,
        page: int = 1,
        limit: int = 10,
        category_id: str | None = None,
        keyword: str | None = None,
    ) -> Page:
        params: dict[str, Any] = {"store": tenant.name, "page": page, "limit": limit}
        if category_id:
            payload = await self._api.get(
                f"/products/public/category/{category_id}", params=params
            )
        else:
            params["keyword"] = keyword
            payload = await self._api.get("/products/public", params=params)
        return Page.from_payload(payload, items_key="products")

    async def featured(self, *, tenant: Tenant) -> list[dict[str, Any]]:
        payload = await self._api.get("/products/public/featured", params={"store": tenant.name})
        return Page.from_payload(payload, items_key="products").items

    async def search(
        self,
        *,
        tenant: Tenant,
        query: str,
        page: int = 1,
        limit: int = 10,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> Page:
        payload = await self._api.get(
            "/products/public/search",
            params={
                "store": tenant.name,
                "q": query,
                "page": page,
                "limit": limit,
                "minPrice": min_price,
                "maxPrice": max_price,
            },
        )
        return Page.from_payload(payload, items_key="products")

    async def product(self, *, tenant: Tenant, product_id: str) -> dict[str, Any]:
        return await self._api.get(f"/products/public/{product_id}", params={"store": tenant.name})
