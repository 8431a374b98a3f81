"""Payment provider clients.

A provider exposes exactly two calls, each made once per request and never
retried:

* :meth:`PaymentProvider.create_payment` – ``POST /v1/payments/payment``
* :meth:`PaymentProvider.execute_payment` – ``POST /v1/payments/payment/<id>/execute``

Both return the provider's payment resource as a plain ``dict`` and raise
:class:`~flask_paypal_checkout.exceptions.ProviderError` when the provider
rejects the request.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

import paypalrestsdk
from paypalrestsdk.exceptions import ConnectionError as PayPalConnectionError
from paypalrestsdk.exceptions import MissingConfig

from flask_paypal_checkout.exceptions import ProviderError

logger = logging.getLogger(__name__)


class PaymentProvider:
    """Interface implemented by every provider client."""

    key: str = "base"

    def create_payment(self, request: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def execute_payment(self, payment_id: str, request: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError


class PayPalProvider(PaymentProvider):
    """PayPal REST v1 client backed by :mod:`paypalrestsdk`.

    Each instance owns its own :class:`paypalrestsdk.Api`, so the SDK's
    module-level default configuration is never touched::

        provider = PayPalProvider(client_id="...", client_secret="...")
        payment = provider.create_payment(create_payment_json)

    Args:
        client_id: PayPal REST app client id.
        client_secret: PayPal REST app secret.
        mode: ``"sandbox"`` (default) or ``"live"``.
    """

    key = "paypal"

    def __init__(self, client_id: str | None, client_secret: str | None, mode: str = "sandbox") -> None:
        self.mode = mode
        self.api = paypalrestsdk.Api(
            mode=mode,
            client_id=client_id or "",
            client_secret=client_secret or "",
        )

    def create_payment(self, request: dict[str, Any]) -> dict[str, Any]:
        payment = paypalrestsdk.Payment(request, api=self.api)
        try:
            ok = payment.create()
        except (PayPalConnectionError, MissingConfig) as exc:
            raise ProviderError(f"PayPal request failed: {exc}") from exc
        if not ok:
            raise _rejected("create", payment.error)
        return payment.to_dict()

    def execute_payment(self, payment_id: str, request: dict[str, Any]) -> dict[str, Any]:
        payment = paypalrestsdk.Payment({"id": payment_id}, api=self.api)
        try:
            ok = payment.execute(request)
        except (PayPalConnectionError, MissingConfig) as exc:
            raise ProviderError(f"PayPal request failed: {exc}") from exc
        if not ok:
            raise _rejected("execute", payment.error)
        return payment.to_dict()


def _rejected(operation: str, error: Any) -> ProviderError:
    body = error if isinstance(error, dict) else {}
    logger.error("Provider rejected %s: %s", operation, body)
    message = body.get("message") or body.get("name") or f"PayPal {operation} failed"
    return ProviderError(message, details=body.get("details"), response=body)


class DummyProvider(PaymentProvider):
    """Offline provider for tests and local development.

    Every call is recorded in :attr:`created` / :attr:`executed`.  Pass
    *create_error* or *execute_error* (a PayPal-style error body) to make the
    corresponding call fail with :class:`ProviderError`.
    """

    key = "dummy"

    def __init__(
        self,
        *,
        base_url: str = "https://dummy-pay.example.com",
        create_error: dict[str, Any] | None = None,
        execute_error: dict[str, Any] | None = None,
        omit_approval_link: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.create_error = create_error
        self.execute_error = execute_error
        self.omit_approval_link = omit_approval_link
        self.created: list[dict[str, Any]] = []
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self._ids = itertools.count(1)

    def create_payment(self, request: dict[str, Any]) -> dict[str, Any]:
        self.created.append(request)
        if self.create_error is not None:
            raise _rejected("create", self.create_error)

        payment_id = f"PAY-DUMMY-{next(self._ids)}"
        token = f"EC-{payment_id}"
        links = [
            {
                "href": f"{self.base_url}/v1/payments/payment/{payment_id}",
                "rel": "self",
                "method": "GET",
            },
            {
                "href": f"{self.base_url}/execute/{payment_id}",
                "rel": "execute",
                "method": "POST",
            },
        ]
        if not self.omit_approval_link:
            links.insert(
                1,
                {
                    "href": f"{self.base_url}/checkoutnow?token={token}",
                    "rel": "approval_url",
                    "method": "REDIRECT",
                },
            )
        return {
            "id": payment_id,
            "intent": request.get("intent"),
            "state": "created",
            "payer": request.get("payer"),
            "transactions": request.get("transactions"),
            "links": links,
        }

    def execute_payment(self, payment_id: str, request: dict[str, Any]) -> dict[str, Any]:
        self.executed.append((payment_id, request))
        if self.execute_error is not None:
            raise _rejected("execute", self.execute_error)
        return {
            "id": payment_id,
            "state": "approved",
            "payer": {
                "payment_method": "paypal",
                "payer_info": {"payer_id": request.get("payer_id")},
            },
            "transactions": request.get("transactions"),
        }
