"""
storefront_core.cart.reducers

Pure reducers over an immutable tuple of cart lines.

Each reducer returns the *same* tuple object when nothing changed, so callers can
cheaply detect no-ops (`new is old`).
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from storefront_core.cart.models import CartLine, CartTotals

Lines = tuple[CartLine, ...]


def find_index(lines: Lines, product_id: str) -> int | None:
    for index, line in enumerate(lines):
        if line.product_id == product_id:
            return index
    return None


def add_line(lines: Lines, line: CartLine, *, quantity: int = 1) -> Lines:
    """
    Add `quantity` units of `line`'s product.

    - A new product is inserted with quantity 1 regardless of stock.
    - Further units are added only while below the product's stock ceiling
      (extra units past the ceiling are silently dropped).
    """

    if quantity < 1:
        return lines

    index = find_index(lines, line.product_id)
    remaining = quantity
    if index is None:
        lines = (*lines, replace(line, quantity=1))
        index = len(lines) - 1
        remaining -= 1

    current = lines[index]
    ceiling = line.stock
    target = max(current.quantity, min(current.quantity + remaining, ceiling))
    if target == current.quantity:
        return lines

    updated = replace(current, quantity=target, stock=ceiling)
    return (*lines[:index], updated, *lines[index + 1 :])


def decrease_line(lines: Lines, product_id: str) -> Lines:
    index = find_index(lines, product_id)
    if index is None:
        return lines

    current = lines[index]
    if current.quantity > 1:
        updated = replace(current, quantity=current.quantity - 1)
        return (*lines[:index], updated, *lines[index + 1 :])
    return (*lines[:index], *lines[index + 1 :])


def remove_line(lines: Lines, product_id: str) -> Lines:
    index = find_index(lines, product_id)
    if index is None:
        return lines
    return (*lines[:index], *lines[index + 1 :])


def compute_totals(lines: Lines) -> CartTotals:
    amount = sum((line.subtotal for line in lines), Decimal("0"))
    quantity = sum(line.quantity for line in lines)
    return CartTotals(quantity=quantity, amount=amount)


# --- Module Notes -----------------------------------------------------------
# Totals are always recomputed from the lines; nothing keeps a running counter.
