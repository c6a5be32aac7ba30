"""
storefront_core.cart.store

Persisted cart store.

Responsibilities:
- Hold the authoritative cart lines for the session.
- Apply add/decrease/remove/clear through the pure reducers under a single-writer lock.
- Mirror the lines to durable storage after every change and reload them at startup.
"""

from __future__ import annotations

import json
import threading
from decimal import InvalidOperation
from typing import Any

from storefront_core.cart.ingest import InvalidProductError, line_from_product, product_identity
from storefront_core.cart.models import DEFAULT_STOCK_CEILING, CartLine, CartTotals
from storefront_core.cart.reducers import (
    Lines,
    add_line,
    compute_totals,
    decrease_line,
    remove_line,
)
from storefront_core.observability.logging import get_logger
from storefront_core.storage.base import KeyValueStore
from storefront_core.storage.keys import CART_KEY

log = get_logger(__name__)


class CartStore:
    """
    None of the operations raise: unknown products and invalid input are no-ops.
    Mutators return True when the cart changed, so a caller can tell the user when
    an add was ignored because the stock ceiling was reached.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStore,
        default_stock: int = DEFAULT_STOCK_CEILING,
    ) -> None:
        self._storage = storage
        self._default_stock = default_stock
        self._lock = threading.RLock()
        self._lines: Lines = self._load()

    @property
    def lines(self) -> Lines:
        return self._lines

    def line(self, product: Any) -> CartLine | None:
        product_id = product_identity(product)
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def add(self, product: Any, quantity: int = 1) -> bool:
        """
        `product` is a catalog product mapping, a `CartLine`, or the id of a line
        already in the cart.
        """

        if quantity < 1:
            return False

        with self._lock:
            existing = self.line(product) if isinstance(product, str) else None
            try:
                line = existing or line_from_product(product, default_stock=self._default_stock)
            except InvalidProductError as e:
                log.warning("cart.add.invalid_product", error=str(e))
                return False
            changed = self._commit(add_line(self._lines, line, quantity=quantity))

        if not changed:
            log.info("cart.add.at_stock_ceiling", product_id=line.product_id, stock=line.stock)
        return changed

    def decrease(self, product: Any) -> bool:
        product_id = product_identity(product)
        if product_id is None:
            return False
        with self._lock:
            return self._commit(decrease_line(self._lines, product_id))

    def remove(self, product: Any) -> bool:
        product_id = product_identity(product)
        if product_id is None:
            return False
        with self._lock:
            return self._commit(remove_line(self._lines, product_id))

    def clear(self) -> None:
        with self._lock:
            self._lines = ()
            self._persist()
        log.info("cart.cleared")

    def get_totals(self) -> CartTotals:
        return compute_totals(self._lines)

    def _commit(self, lines: Lines) -> bool:
        if lines is self._lines:
            return False
        self._lines = lines
        self._persist()
        return True

    def _persist(self) -> None:
        records = [line.to_record() for line in self._lines]
        self._storage.set(CART_KEY, json.dumps(records))

    def _load(self) -> Lines:
        raw = self._storage.get(CART_KEY)
        if not raw:
            return ()

        try:
            records = json.loads(raw)
        except ValueError as e:
            log.warning("cart.load_failed", error=str(e))
            return ()
        if not isinstance(records, list):
            log.warning("cart.load_failed", error="cart payload is not a list")
            return ()

        lines: list[CartLine] = []
        seen: set[str] = set()
        for record in records:
            try:
                line = CartLine.from_record(record, default_stock=self._default_stock)
            except (ValueError, TypeError, AttributeError, InvalidOperation) as e:
                # Only the unreadable record is dropped; the rest of the cart survives.
                log.warning("cart.record_skipped", error=str(e))
                continue
            if line.quantity < 1 or line.product_id in seen:
                continue
            seen.add(line.product_id)
            lines.append(line)
        return tuple(lines)


# --- Module Notes -----------------------------------------------------------
# The lock serializes mutations from hosts that do not funnel user input through a
# single update queue; reads return the current immutable tuple without locking.
