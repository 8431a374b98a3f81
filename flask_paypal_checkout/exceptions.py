"""Exceptions raised by the checkout controller and payment providers."""

from __future__ import annotations

from typing import Any


class CheckoutError(Exception):
    """Base class for every checkout failure."""


class CartError(CheckoutError):
    """The cart sent by the client, or the one held in the session, is unusable."""


class CartNotFound(CartError):
    def __init__(self, message: str = "Cart not found.") -> None:
        super().__init__(message)


class PaymentAlreadyProcessed(CartError):
    def __init__(self, payment_id: str, message: str = "Payment already processed.") -> None:
        super().__init__(message)
        self.payment_id = payment_id


class ProviderError(CheckoutError):
    """The payment provider rejected a request.

    Attributes:
        details: Provider-supplied detail (PayPal sends a list of
            ``{"field", "issue"}`` dicts), or ``None``.
        response: The full error body returned by the provider, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Any = None,
        response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details
        self.response = response or {}
