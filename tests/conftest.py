"""
tests.conftest

Shared fixtures.

Responsibilities:
- An in-process fake of the REST backend (FastAPI) reached through httpx.ASGITransport.
- A transport wrapper that injects connection failures per path.
- Settings/storage/client fixtures wired the same way the composition roots do it.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from storefront_core.clients.http import ApiClient, create_http_client
from storefront_core.clients.navigation import HeadlessNavigator
from storefront_core.settings import Settings
from storefront_core.storage.memory import InMemoryKeyValueStore

BASE_URL = "http://backend.test/api"


def _public(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in record.items() if k != "password"}


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"message": message})


@dataclass
class FakeBackend:
    stores: list[dict[str, Any]] = field(default_factory=list)
    default_store: dict[str, Any] | None = None
    admins: dict[str, dict[str, Any]] = field(default_factory=dict)
    customers: dict[str, dict[str, Any]] = field(default_factory=dict)
    tokens: dict[str, tuple[str, str]] = field(default_factory=dict)
    products: list[dict[str, Any]] = field(default_factory=list)
    categories: list[dict[str, Any]] = field(default_factory=list)
    orders: list[dict[str, Any]] = field(default_factory=list)
    # Statuses answered by the profile endpoints before they start succeeding.
    profile_failures: list[int] = field(default_factory=list)
    seen: list[dict[str, Any]] = field(default_factory=list)
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    def issue(self, kind: str, email: str) -> str:
        token = f"{kind}-token-{next(self._ids)}"
        self.tokens[token] = (kind, email)
        return token

    def paths(self) -> list[str]:
        return [entry["path"] for entry in self.seen]


def _page(items: list[dict[str, Any]], key: str, request: Request) -> dict[str, Any]:
    page = int(request.query_params.get("page", 1))
    limit = int(request.query_params.get("limit", 10))
    start = (page - 1) * limit
    return {
        key: items[start : start + limit],
        "page": page,
        "pages": math.ceil(len(items) / limit),
        "total": len(items),
    }


def build_backend_app(backend: FakeBackend) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def record(request: Request, call_next):
        backend.seen.append(
            {
                "method": request.method,
                "path": request.url.path,
                "params": dict(request.query_params),
                "authorization": request.headers.get("authorization"),
                "store": request.headers.get("x-store-id"),
                "request_id": request.headers.get("x-request-id"),
            }
        )
        return await call_next(request)

    def _caller(request: Request, kind: str) -> dict[str, Any] | None:
        token = request.headers.get("authorization", "").removeprefix("Bearer ").strip()
        entry = backend.tokens.get(token)
        if entry is None or entry[0] != kind:
            return None
        directory = backend.admins if kind == "admin" else backend.customers
        return directory.get(entry[1])

    def _any_caller(request: Request) -> dict[str, Any] | None:
        return _caller(request, "customer") or _caller(request, "admin")

    # --- stores ------------------------------------------------------------

    @app.get("/api/stores/public/default")
    async def default_store():
        if backend.default_store is None:
            return _error(404, "No stores available")
        return {"store": backend.default_store}

    @app.get("/api/stores/public/{identifier}")
    async def store_by_identifier(identifier: str):
        for store in backend.stores:
            if identifier.lower() in (store["name"].lower(), store["slug"]):
                return {"store": store}
        return _error(404, "Store not found")

    # --- admin auth --------------------------------------------------------

    @app.post("/api/admin/login")
    async def admin_login(request: Request):
        body = await request.json()
        admin = backend.admins.get(body.get("email"))
        if admin is None or admin["password"] != body.get("password"):
            return _error(401, "Invalid email or password")
        return {**_public(admin), "token": backend.issue("admin", admin["email"])}

    @app.get("/api/admin/profile")
    async def admin_profile(request: Request):
        if backend.profile_failures:
            return _error(backend.profile_failures.pop(0), "Service unavailable")
        admin = _caller(request, "admin")
        if admin is None:
            return _error(401, "Not authorized, token failed")
        return _public(admin)

    @app.put("/api/admin/profile")
    async def admin_update_profile(request: Request):
        admin = _caller(request, "admin")
        if admin is None:
            return _error(401, "Not authorized, token failed")
        admin.update(await request.json())
        return _public(admin)

    # --- customer auth -----------------------------------------------------

    def _grant(customer: dict[str, Any]) -> dict[str, Any]:
        store = next(s for s in backend.stores if s["_id"] == customer["storeId"])
        return {
            "message": "Login successful",
            "customer": _public(customer),
            "token": backend.issue("customer", customer["email"]),
            "store": {"id": store["_id"], "name": store["name"], "slug": store["slug"]},
        }

    @app.post("/api/customer/auth/login")
    async def customer_login(request: Request):
        body = await request.json()
        customer = backend.customers.get(body.get("email"))
        if customer is None or customer["password"] != body.get("password"):
            return _error(401, "Invalid email or password")
        return _grant(customer)

    @app.post("/api/customer/auth/signup")
    async def customer_signup(request: Request):
        body = await request.json()
        if body.get("email") in backend.customers:
            return _error(400, "Customer already exists with this email")
        store = next(s for s in backend.stores if s["name"] == body.get("storeName"))
        customer = {
            "_id": f"cust-{next(backend._ids)}",
            "storeId": store["_id"],
            "firstName": body.get("firstName", ""),
            "lastName": body.get("lastName", ""),
            "email": body["email"],
            "password": body["password"],
            "addresses": [],
        }
        backend.customers[customer["email"]] = customer
        return JSONResponse(status_code=201, content=_grant(customer))

    @app.get("/api/customer/auth/profile")
    async def customer_profile(request: Request):
        if backend.profile_failures:
            return _error(backend.profile_failures.pop(0), "Service unavailable")
        customer = _caller(request, "customer")
        if customer is None:
            return _error(401, "Not authorized, token failed")
        return _public(customer)

    @app.put("/api/customer/auth/profile")
    async def customer_update_profile(request: Request):
        customer = _caller(request, "customer")
        if customer is None:
            return _error(401, "Not authorized, token failed")
        customer.update(await request.json())
        return {"message": "Profile updated successfully", "customer": _public(customer)}

    @app.put("/api/customer/auth/change-password")
    async def customer_change_password(request: Request):
        customer = _caller(request, "customer")
        if customer is None:
            return _error(401, "Not authorized, token failed")
        body = await request.json()
        if body.get("currentPassword") != customer["password"]:
            return _error(400, "Current password is incorrect")
        customer["password"] = body["newPassword"]
        return {"message": "Password changed successfully"}

    # --- catalog -----------------------------------------------------------

    @app.get("/api/categories/public")
    async def public_categories(request: Request):
        if not request.query_params.get("store"):
            return _error(400, "Store not specified")
        return _page(backend.categories, "categories", request)

    @app.get("/api/products/public")
    async def public_products(request: Request):
        if not request.query_params.get("store"):
            return _error(400, "Store not specified")
        return _page(backend.products, "products", request)

    @app.get("/api/products/public/{product_id}")
    async def public_product(product_id: str):
        for product in backend.products:
            if product["_id"] == product_id:
                return product
        return _error(404, "Product not found")

    # --- admin resources ---------------------------------------------------

    @app.get("/api/categories")
    async def list_categories(request: Request):
        if _caller(request, "admin") is None:
            return _error(401, "Not authorized, no token")
        return _page(backend.categories, "categories", request)

    @app.post("/api/categories")
    async def create_category(request: Request):
        if _caller(request, "admin") is None:
            return _error(401, "Not authorized, no token")
        body = await request.json()
        if not body.get("name"):
            return _error(400, "Category name is required")
        category = {"_id": f"cat-{next(backend._ids)}", **body}
        backend.categories.append(category)
        return JSONResponse(status_code=201, content=category)

    @app.get("/api/boom")
    async def boom():
        return PlainTextResponse("upstream exploded", status_code=500)

    # --- orders ------------------------------------------------------------

    @app.post("/api/orders")
    async def create_order(request: Request):
        if _any_caller(request) is None:
            return _error(401, "Not authorized, no token")
        body = await request.json()
        if not body.get("items"):
            return _error(400, "No order items")
        order = {"_id": f"order-{next(backend._ids)}", **body}
        backend.orders.append(order)
        return JSONResponse(status_code=201, content=order)

    @app.get("/api/orders")
    async def list_orders(request: Request):
        if _any_caller(request) is None:
            return _error(401, "Not authorized, no token")
        return _page(backend.orders, "orders", request)

    @app.put("/api/orders/{order_id}/status")
    async def update_order_status(order_id: str, request: Request):
        if _caller(request, "admin") is None:
            return _error(401, "Not authorized, no token")
        for order in backend.orders:
            if order["_id"] == order_id:
                order["status"] = (await request.json())["status"]
                return order
        return _error(404, "Order not found")

    return app


class FlakyTransport(httpx.AsyncBaseTransport):
    """
    Delegates to an inner transport, raising ConnectError for the next N requests
    to a given path.
    """

    def __init__(self, inner: httpx.AsyncBaseTransport) -> None:
        self._inner = inner
        self._failures: dict[str, int] = {}

    def fail_next(self, path: str, times: int = 1) -> None:
        self._failures[path] = self._failures.get(path, 0) + times

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        remaining = self._failures.get(request.url.path, 0)
        if remaining:
            self._failures[request.url.path] = remaining - 1
            raise httpx.ConnectError("connection refused", request=request)
        return await self._inner.handle_async_request(request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        env="test",
        api_base_url=BASE_URL,
        storage_url="memory://",
        session_retry_delay_seconds=0.25,
        log_level="WARNING",
    )


@pytest.fixture
def storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def backend() -> FakeBackend:
    ewa = {"_id": "store-ewa", "name": "Ewa Luxe", "slug": "ewa-luxe", "status": "active"}
    acme = {"_id": "store-acme", "name": "Acme", "slug": "acme", "status": "active"}
    return FakeBackend(
        stores=[ewa, acme],
        default_store=ewa,
        admins={
            "ada@ewa.test": {
                "_id": "admin-1",
                "name": "Ada Admin",
                "email": "ada@ewa.test",
                "password": "s3cret",
                "status": "active",
                "storeName": "Ewa Luxe",
                "storeId": "store-ewa",
                "role": "admin",
                "permissions": ["orders", "products"],
            }
        },
        customers={
            "cy@ewa.test": {
                "_id": "cust-1",
                "storeId": "store-ewa",
                "firstName": "Cy",
                "lastName": "Customer",
                "email": "cy@ewa.test",
                "password": "hunter2",
                "phone": "+1 555 0100",
                "addresses": [
                    {
                        "firstName": "Cy",
                        "lastName": "Customer",
                        "line1": "1 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "country": "US",
                        "zipCode": "62701",
                        "isDefault": True,
                    }
                ],
            }
        },
        products=[
            {
                "_id": f"prod-{i}",
                "name": f"Product {i}",
                "price": 10 + i,
                "stock": {"quantity": 5, "lowStockThreshold": 1, "trackQuantity": True},
                "images": [f"/uploads/prod-{i}.jpg"],
            }
            for i in range(1, 13)
        ],
        categories=[{"_id": "cat-rings", "name": "Rings", "slug": "rings"}],
    )


@pytest.fixture
def transport(backend: FakeBackend) -> FlakyTransport:
    return FlakyTransport(httpx.ASGITransport(app=build_backend_app(backend)))


@pytest.fixture
def navigator() -> HeadlessNavigator:
    return HeadlessNavigator("/dashboard")


@pytest.fixture
def api(
    settings: Settings,
    storage: InMemoryKeyValueStore,
    transport: FlakyTransport,
    navigator: HeadlessNavigator,
) -> ApiClient:
    http = create_http_client(settings, transport=transport)
    return ApiClient(settings=settings, http=http, storage=storage, navigator=navigator)


# --- Module Notes -----------------------------------------------------------
# The fake backend mirrors the response shapes of the real REST API (store envelopes,
# page/pages/total lists, {"message": ...} errors), not its business rules.
