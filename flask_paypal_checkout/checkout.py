"""Cart parsing and PayPal request payload builders.

Everything here is pure: no session, no provider, no framework.  The
controller feeds a raw JSON cart in and gets provider-ready dicts out::

    cart = parse_cart([{"name": "Rose", "price": 12.5}])
    cart_total(cart)                       # Decimal("12.50")
    build_create_payment_request(cart, return_url=..., cancel_url=...)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from flask_paypal_checkout.exceptions import CartError

#: The only currency the checkout charges in.
CURRENCY = "USD"
INTENT = "sale"
PAYMENT_METHOD = "paypal"
APPROVAL_REL = "approval_url"

_CENTS = Decimal("0.01")


def to_amount(value: Any) -> Decimal:
    """Convert *value* to a non-negative 2-place :class:`~decimal.Decimal`.

    Raises:
        CartError: If *value* is not a finite, non-negative number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise CartError(f"Invalid price: {value!r}")
    try:
        amount = Decimal(str(value))
        if not amount.is_finite() or amount < 0:
            raise CartError(f"Invalid price: {value!r}")
        # Raises InvalidOperation past the context precision (e.g. 1e30).
        amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise CartError(f"Invalid price: {value!r}") from exc
    # -0.0 passes the sign check; drop its sign.
    return abs(amount)


def format_amount(amount: Decimal) -> str:
    return f"{amount.quantize(_CENTS, rounding=ROUND_HALF_UP):.2f}"


@dataclass(frozen=True)
class CartItem:
    """A single cart line.  Quantity is always one."""

    name: str
    price: Decimal

    quantity = 1

    @classmethod
    def from_dict(cls, data: Any) -> "CartItem":
        if not isinstance(data, dict):
            raise CartError(f"Invalid cart item: {data!r}")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CartError("Cart item name must be a non-empty string.")
        return cls(name=name, price=to_amount(data.get("price")))

    def to_dict(self) -> dict[str, str]:
        """JSON-compatible form kept in the session store."""
        return {"name": self.name, "price": format_amount(self.price)}

    def to_paypal_item(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "price": format_amount(self.price),
            "currency": CURRENCY,
            "quantity": self.quantity,
        }


def parse_cart(raw: Any) -> list[CartItem]:
    """Validate a client-supplied cart and return its items in order.

    An empty list is a valid (if pointless) cart.

    Raises:
        CartError: If *raw* is not a list or any entry is malformed.
    """
    if not isinstance(raw, list):
        raise CartError("Cart must be a list of items.")
    return [CartItem.from_dict(entry) for entry in raw]


def cart_total(cart: Iterable[CartItem]) -> Decimal:
    """Sum of the item prices; ``0.00`` for an empty cart."""
    return sum((item.price for item in cart), Decimal("0.00"))


def _amount(cart: Iterable[CartItem]) -> dict[str, str]:
    return {"currency": CURRENCY, "total": format_amount(cart_total(cart))}


def build_create_payment_request(
    cart: list[CartItem],
    *,
    return_url: str,
    cancel_url: str,
    description: str,
) -> dict[str, Any]:
    """Return the body for ``POST /v1/payments/payment``."""
    return {
        "intent": INTENT,
        "payer": {"payment_method": PAYMENT_METHOD},
        "redirect_urls": {"return_url": return_url, "cancel_url": cancel_url},
        "transactions": [
            {
                "item_list": {"items": [item.to_paypal_item() for item in cart]},
                "amount": _amount(cart),
                "description": description,
            }
        ],
    }


def build_execute_payment_request(payer_id: str, cart: list[CartItem]) -> dict[str, Any]:
    """Return the body for ``POST /v1/payments/payment/<id>/execute``."""
    return {
        "payer_id": payer_id,
        "transactions": [{"amount": _amount(cart)}],
    }


def find_approval_url(payment: dict[str, Any]) -> str | None:
    """Return the ``href`` of the ``approval_url`` HATEOAS link, if present."""
    for link in payment.get("links") or []:
        if link.get("rel") == APPROVAL_REL:
            return link.get("href")
    return None
