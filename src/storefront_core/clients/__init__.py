"""
storefront_core.clients

Backend client package.

Responsibilities:
- The HTTP client wrapper (request shaping, error normalization, 401 policy).
- Thin endpoint clients for catalog, orders and admin resources.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Stores depend on `ApiClient`; nothing outside this package talks to httpx directly.
