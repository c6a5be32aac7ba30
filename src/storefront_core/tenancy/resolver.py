"""
storefront_core.tenancy.resolver

Tenant resolution (which store's catalog is being shown).

Responsibilities:
- Pick a store identifier: subdomain -> `store` query parameter -> cached identifier.
- Fetch the store's public metadata once (or the backend's default store).
- Publish distinct "not resolved yet" and "failed" states for dependent views.
"""

from __future__ import annotations

import asyncio
import enum
from urllib.parse import quote

from pydantic import ValidationError

from storefront_core.clients.errors import NETWORK_ERROR_STATUS, ApiError
from storefront_core.clients.http import ApiClient
from storefront_core.observability.logging import bind_tenant, get_logger
from storefront_core.settings import Settings
from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.keys import TENANT_KEY
from storefront_core.tenancy.models import Location, Tenant

log = get_logger(__name__)


class TenantStatus(enum.StrEnum):
    pending = "PENDING"
    loading = "LOADING"
    resolved = "RESOLVED"
    failed = "FAILED"


class TenantSource(enum.StrEnum):
    subdomain = "SUBDOMAIN"
    query = "QUERY"
    cache = "CACHE"
    default = "DEFAULT"


class TenantNotResolvedError(Exception):
    def __init__(self, status: TenantStatus) -> None:
        super().__init__(f"tenant is not available (status={status})")
        self.status = status


def store_path(identifier: str) -> str:
    """
    Public store endpoint for `identifier`, encoded as a single path segment.
    """

    segment = quote(identifier, safe="")
    if not segment.strip("."):
        # "." and ".." would be collapsed into a different path by URL normalization.
        segment = segment.replace(".", "%2E")
    return f"/stores/public/{segment}"


def subdomain_identifier(host: str, *, reserved: tuple[str, ...]) -> str | None:
    hostname = host.split(":", 1)[0].strip().lower()
    if "." not in hostname:
        return None
    label = hostname.split(".", 1)[0]
    if not label or label in reserved:
        return None
    return label


class TenantResolver:
    def __init__(self, *, api: ApiClient, storage: KeyValueStore, settings: Settings) -> None:
        self._api = api
        self._storage = storage
        self._settings = settings
        self._lock = asyncio.Lock()
        self._closed = False

        self.status = TenantStatus.pending
        self.tenant: Tenant | None = None
        self.source: TenantSource | None = None
        self.error: ApiError | None = None

    def identify(self, location: Location) -> tuple[str | None, TenantSource]:
        """
        First match wins; `(None, default)` means the backend's default store is used.
        """

        identifier = subdomain_identifier(
            location.host, reserved=tuple(self._settings.reserved_subdomains)
        )
        if identifier:
            return identifier, TenantSource.subdomain

        identifier = (location.query.get("store") or "").strip()
        if identifier:
            return identifier, TenantSource.query

        identifier = self._storage.get(TENANT_KEY)
        if identifier:
            return identifier, TenantSource.cache

        return None, TenantSource.default

    async def resolve(self, location: Location, *, force: bool = False) -> Tenant | None:
        """
        Resolve the active tenant. A resolved tenant is reused unless `force=True`
        (the retry action after a failure).
        """

        async with self._lock:
            if self.status is TenantStatus.resolved and not force:
                return self.tenant

            identifier, source = self.identify(location)
            self.status = TenantStatus.loading
            self.error = None
            log.info("tenant.resolving", identifier=identifier, source=source)

            try:
                if identifier:
                    payload = await self._api.get(store_path(identifier))
                else:
                    payload = await self._api.get("/stores/public/default")
                tenant = Tenant.model_validate((payload or {})["store"])
            except ApiError as e:
                return self._fail(e, identifier=identifier)
            except (KeyError, TypeError, ValidationError) as e:
                err = ApiError("Invalid store response", NETWORK_ERROR_STATUS, payload=str(e))
                return self._fail(err, identifier=identifier)

            if self._closed:
                log.debug("tenant.discarded", identifier=identifier)
                return None

            if identifier:
                self._storage.set(TENANT_KEY, identifier)

            self.tenant = tenant
            self.source = source
            self.status = TenantStatus.resolved
            bind_tenant(tenant.slug)
            log.info("tenant.resolved", tenant_id=tenant.id, slug=tenant.slug, source=source)
            return tenant

    def _fail(self, err: ApiError, *, identifier: str | None) -> None:
        if self._closed:
            return None
        self.status = TenantStatus.failed
        self.error = err
        log.warning(
            "tenant.failed",
            identifier=identifier,
            status=err.status,
            message=err.message,
        )
        return None

    def require(self) -> Tenant:
        if self.status is not TenantStatus.resolved or self.tenant is None:
            raise TenantNotResolvedError(self.status)
        return self.tenant

    def close(self) -> None:
        # Results that arrive after close are dropped instead of mutating state.
        self._closed = True


# --- Module Notes -----------------------------------------------------------
# Only an explicitly identified store is cached; the default store is looked up again
# on the next load so a newly created store can take its place.
