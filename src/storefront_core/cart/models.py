"""
storefront_core.cart.models

Cart domain models.

Responsibilities:
- `CartLine`: one product in the cart, keyed by a single canonical product id.
- `CartTotals`: derived totals, never stored.
- Record encoding used for durable storage.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

# Stock ceiling used when the catalog does not report stock for a product.
DEFAULT_STOCK_CEILING = 99


def parse_stock(value: Any, *, default: int = DEFAULT_STOCK_CEILING) -> int:
    """
    Read a stock ceiling from either catalog shape: `{"quantity": n, ...}` or a bare
    number. Missing or unreadable stock falls back to `default`.
    """

    if isinstance(value, Mapping):
        value = value.get("quantity")
    if value is None or isinstance(value, bool):
        return default
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True, slots=True)
class CartLine:
    product_id: str
    name: str
    price: Decimal
    quantity: int = 1
    stock: int = DEFAULT_STOCK_CEILING
    image: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_record(self) -> dict[str, Any]:
        # Older storefront builds stored the whole catalog product plus `cartQuantity`;
        # `from_record` reads both that shape and this one.
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "cartQuantity": self.quantity,
            "stock": self.stock,
            "image": self.image,
        }

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        *,
        default_stock: int = DEFAULT_STOCK_CEILING,
    ) -> CartLine:
        product_id = record.get("id") or record.get("_id")
        if not product_id:
            raise ValueError("cart record without product id")
        return cls(
            product_id=str(product_id),
            name=str(record.get("name") or ""),
            price=Decimal(str(record.get("price", "0"))),
            quantity=int(record.get("cartQuantity", 1)),
            stock=parse_stock(record.get("stock"), default=default_stock),
            image=record.get("image") or next(iter(record.get("images") or []), None),
        )


@dataclass(frozen=True, slots=True)
class CartTotals:
    quantity: int = 0
    amount: Decimal = Decimal("0")


# --- Module Notes -----------------------------------------------------------
# Prices are Decimal end to end; records store them as strings to avoid float drift.
