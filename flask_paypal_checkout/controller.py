"""Checkout controller: the create / execute legs of a PayPal redirect checkout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from flask_paypal_checkout.checkout import (
    CartItem,
    build_create_payment_request,
    build_execute_payment_request,
    find_approval_url,
    parse_cart,
)
from flask_paypal_checkout.exceptions import (
    CartError,
    CartNotFound,
    PaymentAlreadyProcessed,
    ProviderError,
)
from flask_paypal_checkout.providers import PaymentProvider
from flask_paypal_checkout.store import SessionStore

logger = logging.getLogger(__name__)

#: Session store key holding the cart between the create and execute legs.
CART_KEY = "cart"
#: Session store key holding the id of the last executed payment.
PROCESSED_KEY = "processed_payment_id"

DEFAULT_RETURN_URL = "http://localhost:8880/success"
DEFAULT_CANCEL_URL = "http://localhost:8880/cancel"
DEFAULT_DESCRIPTION = "Payment for Bloom Bhutan flowers."


@dataclass(frozen=True)
class CheckoutConfig:
    """Settings fixed at application start-up."""

    return_url: str = DEFAULT_RETURN_URL
    cancel_url: str = DEFAULT_CANCEL_URL
    description: str = DEFAULT_DESCRIPTION

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "CheckoutConfig":
        """Build from a Flask/Quart ``app.config``."""
        return cls(
            return_url=config.get("CHECKOUT_RETURN_URL") or DEFAULT_RETURN_URL,
            cancel_url=config.get("CHECKOUT_CANCEL_URL") or DEFAULT_CANCEL_URL,
            description=config.get("CHECKOUT_DESCRIPTION") or DEFAULT_DESCRIPTION,
        )


class CheckoutController:
    """Turns carts into PayPal payments and executes them on return.

    The controller is framework-agnostic: it receives the opaque session id
    and raw request values, and raises
    :class:`~flask_paypal_checkout.exceptions.CheckoutError` subclasses that
    the views translate into HTTP responses.
    """

    def __init__(self, provider: PaymentProvider, store: SessionStore, config: CheckoutConfig) -> None:
        self.provider = provider
        self.store = store
        self.config = config

    def get_cart(self, session_id: str | None) -> list[CartItem] | None:
        """Return the cart stored for *session_id*, or ``None``."""
        if not session_id:
            return None
        raw = self.store.get(session_id, CART_KEY)
        if raw is None:
            return None
        return parse_cart(raw)

    def create_payment(self, session_id: str, raw_cart: Any) -> str:
        """Store the cart, create the payment and return the approval URL.

        The cart is written to the session before the provider is called, so
        it remains stored when the provider rejects the payment.

        Raises:
            CartError: The cart is missing or malformed.
            ProviderError: PayPal rejected the request or returned no
                approval link.
        """
        cart = parse_cart(raw_cart)
        self.store.set(session_id, CART_KEY, [item.to_dict() for item in cart])
        logger.info("Stored cart in session %s: %s", session_id, self.store.get(session_id, CART_KEY))

        request = build_create_payment_request(
            cart,
            return_url=self.config.return_url,
            cancel_url=self.config.cancel_url,
            description=self.config.description,
        )
        payment = self.provider.create_payment(request)

        approval_url = find_approval_url(payment)
        if not approval_url:
            raise ProviderError("Approval URL not found in provider response.", response=payment)
        logger.info("Created payment %s", payment.get("id"))
        return approval_url

    def execute_payment(self, session_id: str | None, payer_id: str | None, payment_id: str | None) -> dict[str, Any]:
        """Execute the approved payment for the cart held in the session.

        On success the cart is removed and *payment_id* is remembered so that
        a replayed return request is refused instead of charging twice.

        Raises:
            PaymentAlreadyProcessed: *payment_id* was already executed.
            CartNotFound: No cart is stored for this session.
            CartError: The provider redirect lacks ``PayerID``/``paymentId``.
            ProviderError: PayPal rejected the execution.
        """
        cart = self.get_cart(session_id)
        if cart is None:
            if session_id and payment_id and self.store.get(session_id, PROCESSED_KEY) == payment_id:
                raise PaymentAlreadyProcessed(payment_id)
            raise CartNotFound()
        if not payer_id or not payment_id:
            raise CartError("Missing payment identifiers.")

        request = build_execute_payment_request(payer_id, cart)
        payment = self.provider.execute_payment(payment_id, request)

        self.store.delete(session_id, CART_KEY)
        self.store.set(session_id, PROCESSED_KEY, payment_id)
        logger.info("Payment %s executed successfully", payment_id)
        return payment
