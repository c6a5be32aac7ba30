"""
tests.test_app

Composition roots wired against the fake backend.

Responsibilities:
- Storefront start-up (tenant + session), catalog browsing, login and checkout.
- Admin console start-up, resource CRUD and order management.
"""

from __future__ import annotations

import pytest

from storefront_core.app import create_admin_console, create_storefront
from storefront_core.auth.models import SessionStatus
from storefront_core.clients.errors import ApiError
from storefront_core.storage.keys import TENANT_KEY, TOKEN_KEY
from storefront_core.tenancy import Location, TenantStatus


@pytest.mark.asyncio
async def test_storefront_browse_login_and_checkout(settings, storage, transport, backend) -> None:
    shop = create_storefront(settings=settings, storage=storage, transport=transport)
    try:
        tenant, status = await shop.start(Location.from_url("http://acme.shop.test/"))
        assert tenant.name == "Acme"
        assert status is SessionStatus.unauthenticated
        assert storage.get(TENANT_KEY) == "acme"

        first = await shop.catalog.products(tenant=tenant)
        assert len(first.items) == 10
        assert first.has_next
        second = await shop.catalog.products(tenant=tenant, page=first.page + 1)
        assert not second.has_next
        assert backend.seen[-1]["params"]["store"] == "Acme"

        categories = await shop.catalog.categories(tenant=tenant)
        assert [c["slug"] for c in categories] == ["rings"]

        product = await shop.catalog.product(tenant=tenant, product_id="prod-3")
        assert shop.cart.add(product, quantity=2)

        await shop.login("cy@ewa.test", "hunter2")
        assert shop.session.is_authenticated

        order = await shop.checkout.place_order(principal=shop.session.principal)
        assert order["pricing"]["total"] == 26.0
        assert shop.cart.get_totals().quantity == 0
    finally:
        await shop.aclose()


@pytest.mark.asyncio
async def test_storefront_without_navigator_is_not_redirected(
    settings, storage, transport
) -> None:
    storage.set(TOKEN_KEY, "revoked")
    storage.set("storeId", "store-ewa")
    storage.set("storeName", "Ewa Luxe")
    shop = create_storefront(settings=settings, storage=storage, transport=transport)
    try:
        tenant, status = await shop.start(Location(host="ghost.shop.test"))

        assert tenant is None
        assert shop.tenant.status is TenantStatus.failed
        assert status is SessionStatus.unauthenticated
        assert storage.get(TOKEN_KEY) is None
    finally:
        await shop.aclose()


@pytest.mark.asyncio
async def test_admin_console_manages_resources(settings, storage, transport, backend) -> None:
    console = create_admin_console(settings=settings, storage=storage, transport=transport)
    try:
        assert await console.start() is SessionStatus.unauthenticated
        await console.session.login("ada@ewa.test", "s3cret")

        created = await console.categories.create({"name": "Necklaces", "slug": "necklaces"})
        listed = await console.categories.list()
        assert created["_id"] in [c["_id"] for c in listed.items]

        with pytest.raises(ApiError) as exc:
            await console.categories.create({"slug": "nameless"})
        assert exc.value.status == 400
        assert exc.value.message == "Category name is required"

        backend.orders.append({"_id": "order-x", "status": "pending", "items": [{"product": "p"}]})
        page = await console.orders.list()
        assert page.total == 1
        updated = await console.orders.update_status("order-x", "shipped")
        assert updated["status"] == "shipped"
        with pytest.raises(ValueError):
            await console.orders.update_status("order-x", "teleported")
    finally:
        await console.aclose()


@pytest.mark.asyncio
async def test_admin_console_redirects_on_expired_session(
    settings, storage, transport, navigator
) -> None:
    console = create_admin_console(
        settings=settings, storage=storage, transport=transport, navigator=navigator
    )
    try:
        await console.session.login("ada@ewa.test", "s3cret")
        storage.set(TOKEN_KEY, "revoked")

        with pytest.raises(ApiError):
            await console.orders.list()

        assert console.session.status is SessionStatus.unauthenticated
        assert navigator.history == ["/login"]
    finally:
        await console.aclose()
