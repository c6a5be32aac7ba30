"""
storefront_core.services.checkout_service

Checkout flow.

Responsibilities:
- Build the order payload from the cart lines, the customer and a delivery address.
- Submit it and clear the cart only after the backend accepted the order.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from storefront_core.auth.models import CustomerPrincipal, Principal
from storefront_core.cart.models import CartLine
from storefront_core.cart.store import CartStore
from storefront_core.clients.orders import OrdersClient
from storefront_core.observability.logging import get_logger

log = get_logger(__name__)


class EmptyCartError(Exception):
    pass


def _money(value: Decimal) -> float:
    # The backend stores prices as JSON numbers.
    return float(value)


def _item(line: CartLine) -> dict[str, Any]:
    return {
        "product": line.product_id,
        "name": line.name,
        "image": line.image,
        "price": _money(line.price),
        "quantity": line.quantity,
    }


def _postal(address: dict[str, Any]) -> dict[str, Any]:
    return {
        "line1": address.get("line1"),
        "city": address.get("city"),
        "state": address.get("state"),
        "country": address.get("country"),
        "zipCode": address.get("zipCode"),
    }


def build_order(
    *,
    lines: tuple[CartLine, ...],
    principal: Principal,
    address: dict[str, Any],
    payment_method: str = "cod",
) -> dict[str, Any]:
    subtotal = sum((line.subtotal for line in lines), Decimal("0"))
    phone = address.get("phone")
    if phone is None and isinstance(principal, CustomerPrincipal):
        phone = principal.phone

    return {
        "items": [_item(line) for line in lines],
        "billing": {
            "firstName": address.get("firstName"),
            "lastName": address.get("lastName"),
            "email": principal.email,
            "phone": phone,
            "address": _postal(address),
        },
        "shipping": {
            "firstName": address.get("firstName"),
            "lastName": address.get("lastName"),
            "address": _postal(address),
            "method": "standard",
            "cost": 0,
        },
        "payment": {"method": payment_method, "status": "pending", "amount": _money(subtotal)},
        "pricing": {
            "subtotal": _money(subtotal),
            "tax": 0,
            "shipping": 0,
            "discount": 0,
            "total": _money(subtotal),
        },
        "status": "pending",
    }


class CheckoutService:
    def __init__(self, *, cart: CartStore, orders: OrdersClient) -> None:
        self._cart = cart
        self._orders = orders

    async def place_order(
        self,
        *,
        principal: Principal,
        address: dict[str, Any] | None = None,
        payment_method: str = "cod",
    ) -> dict[str, Any]:
        lines = self._cart.lines
        if not lines:
            raise EmptyCartError("cannot check out an empty cart")

        if address is None and isinstance(principal, CustomerPrincipal):
            address = principal.default_address()
        if not address:
            raise ValueError("a delivery address is required")

        order = build_order(
            lines=lines, principal=principal, address=address, payment_method=payment_method
        )
        # ApiError propagates with the cart untouched so the customer can retry.
        created = await self._orders.create(order)

        self._cart.clear()
        log.info(
            "checkout.order_placed",
            order_id=(created or {}).get("_id"),
            items=len(lines),
            total=order["pricing"]["total"],
        )
        return created


# --- Module Notes -----------------------------------------------------------
# Only cash-on-delivery orders are created here; payment capture happens server-side.
