"""
storefront_core.cart.ingest

Catalog -> cart boundary.

Responsibilities:
- Resolve the canonical product id once (`id` or `_id`, whichever the source used).
- Read the stock ceiling from either stock shape (`{"quantity": n}` or a bare number).
- Build `CartLine` values from raw catalog products.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from storefront_core.cart.models import DEFAULT_STOCK_CEILING, CartLine, parse_stock


class InvalidProductError(ValueError):
    pass


def product_identity(product: Any) -> str | None:
    if isinstance(product, CartLine):
        return product.product_id
    if isinstance(product, str):
        return product or None
    if isinstance(product, Mapping):
        value = product.get("id") or product.get("_id")
        return str(value) if value else None
    return None


def stock_ceiling(product: Mapping[str, Any], *, default: int = DEFAULT_STOCK_CEILING) -> int:
    return parse_stock(product.get("stock"), default=default)


def line_from_product(
    product: Mapping[str, Any] | CartLine,
    *,
    default_stock: int = DEFAULT_STOCK_CEILING,
) -> CartLine:
    if isinstance(product, CartLine):
        return product
    if not isinstance(product, Mapping):
        # A bare id carries no price or stock, so it cannot start a new line.
        raise InvalidProductError(f"not a catalog product: {product!r}")

    product_id = product_identity(product)
    if product_id is None:
        raise InvalidProductError("product has no id")

    try:
        price = Decimal(str(product.get("price", "0")))
    except InvalidOperation as e:
        raise InvalidProductError(f"invalid price for product {product_id}") from e
    if price < 0:
        raise InvalidProductError(f"negative price for product {product_id}")

    image = product.get("image")
    if not image:
        images = product.get("images") or []
        image = images[0] if images else None

    return CartLine(
        product_id=product_id,
        name=str(product.get("name") or ""),
        price=price,
        quantity=1,
        stock=stock_ceiling(product, default=default_stock),
        image=image,
    )
