"""
storefront_core.tenancy

Tenant (store) identification.

Responsibilities:
- `Tenant` model and the resolver that picks the active store once per load.
"""

from storefront_core.tenancy.models import Location, Tenant
from storefront_core.tenancy.resolver import TenantNotResolvedError, TenantResolver, TenantStatus

__all__ = ["Location", "Tenant", "TenantNotResolvedError", "TenantResolver", "TenantStatus"]
