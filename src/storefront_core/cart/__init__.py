"""
storefront_core.cart

Client-side shopping cart.

Responsibilities:
- Cart line model and derived totals.
- Pure reducers for add/decrease/remove.
- Persisted store mirroring the lines to durable storage.
"""

from storefront_core.cart.models import CartLine, CartTotals
from storefront_core.cart.store import CartStore

__all__ = ["CartLine", "CartTotals", "CartStore"]
