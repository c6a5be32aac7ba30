"""
storefront_core.app

Composition roots for the two client applications.

Responsibilities:
- Build storage, the HTTP client and every store for the storefront or the dashboard.
- Provide start/close hooks so hosts wire one object instead of eight.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from storefront_core.auth.models import Principal, SessionStatus
from storefront_core.auth.profiles import ADMIN, CUSTOMER
from storefront_core.auth.session import SessionStore
from storefront_core.cart.store import CartStore
from storefront_core.clients.catalog import CatalogClient
from storefront_core.clients.http import ApiClient, create_http_client
from storefront_core.clients.navigation import HeadlessNavigator, Navigator
from storefront_core.clients.orders import OrdersClient
from storefront_core.clients.resources import ResourceClient
from storefront_core.observability.logging import configure_logging, get_logger
from storefront_core.services.checkout_service import CheckoutService
from storefront_core.settings import Settings, get_settings
from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.keys import STORE_NAME_KEY
from storefront_core.storage.memory import InMemoryKeyValueStore
from storefront_core.storage.repository import SqlKeyValueStore
from storefront_core.storage.session import create_engine, create_sessionmaker, init_storage
from storefront_core.tenancy.models import Location, Tenant
from storefront_core.tenancy.resolver import TenantResolver

log = get_logger(__name__)


def create_storage(settings: Settings) -> KeyValueStore:
    if settings.storage_url.startswith("memory://"):
        return InMemoryKeyValueStore()

    engine = create_engine(settings)
    init_storage(engine)
    return SqlKeyValueStore(create_sessionmaker(engine), engine=engine)


@dataclass(slots=True)
class Storefront:
    settings: Settings
    storage: KeyValueStore
    api: ApiClient
    tenant: TenantResolver
    session: SessionStore
    cart: CartStore
    catalog: CatalogClient
    orders: OrdersClient
    checkout: CheckoutService

    async def start(self, location: Location) -> tuple[Tenant | None, SessionStatus]:
        # Tenant resolution and session validation are independent; run them together.
        tenant, status = await asyncio.gather(
            self.tenant.resolve(location),
            self.session.startup_validate(),
        )
        log.info("storefront.started", tenant=tenant.slug if tenant else None, session=status)
        return tenant, status

    async def login(self, email: str, password: str) -> Principal:
        current = self.tenant.tenant
        store_name = current.name if current else self.storage.get(STORE_NAME_KEY)
        return await self.session.login(email, password, store_name=store_name)

    async def aclose(self) -> None:
        self.tenant.close()
        self.session.close()
        await self.api.aclose()
        if isinstance(self.storage, SqlKeyValueStore):
            self.storage.close()


@dataclass(slots=True)
class AdminConsole:
    settings: Settings
    storage: KeyValueStore
    api: ApiClient
    session: SessionStore
    orders: OrdersClient
    categories: ResourceClient
    products: ResourceClient
    customers: ResourceClient

    async def start(self) -> SessionStatus:
        return await self.session.startup_validate()

    async def aclose(self) -> None:
        self.session.close()
        await self.api.aclose()
        if isinstance(self.storage, SqlKeyValueStore):
            self.storage.close()


def _api_client(
    settings: Settings,
    storage: KeyValueStore,
    navigator: Navigator | None,
    transport: httpx.AsyncBaseTransport | None,
) -> ApiClient:
    http = create_http_client(settings, transport=transport)
    return ApiClient(settings=settings, http=http, storage=storage, navigator=navigator)


def create_storefront(
    *,
    settings: Settings | None = None,
    storage: KeyValueStore | None = None,
    navigator: Navigator | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Storefront:
    """
    Customer-facing storefront. Without a navigator a 401 only ends the session;
    pass one to also be sent to the login view.
    """

    settings = settings or get_settings()
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    storage = storage if storage is not None else create_storage(settings)
    api = _api_client(settings, storage, navigator, transport)
    cart = CartStore(storage=storage, default_stock=settings.default_stock_ceiling)
    orders = OrdersClient(api=api)

    return Storefront(
        settings=settings,
        storage=storage,
        api=api,
        tenant=TenantResolver(api=api, storage=storage, settings=settings),
        session=SessionStore(api=api, storage=storage, profile=CUSTOMER, settings=settings),
        cart=cart,
        catalog=CatalogClient(api=api),
        orders=orders,
        checkout=CheckoutService(cart=cart, orders=orders),
    )


def create_admin_console(
    *,
    settings: Settings | None = None,
    storage: KeyValueStore | None = None,
    navigator: Navigator | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AdminConsole:
    """
    Admin dashboard. A 401 on any call redirects to the login view.
    """

    settings = settings or get_settings()
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    storage = storage if storage is not None else create_storage(settings)
    api = _api_client(settings, storage, navigator or HeadlessNavigator(), transport)

    return AdminConsole(
        settings=settings,
        storage=storage,
        api=api,
        session=SessionStore(api=api, storage=storage, profile=ADMIN, settings=settings),
        orders=OrdersClient(api=api),
        categories=ResourceClient(api=api, path="/categories", items_key="categories"),
        products=ResourceClient(api=api, path="/products", items_key="products"),
        customers=ResourceClient(api=api, path="/customers", items_key="customers"),
    )


# --- Module Notes -----------------------------------------------------------
# Business rules stay in the stores; this module only wires them together.
