"""flask_paypal_checkout – Flask/Quart extension for a PayPal redirect checkout."""

from __future__ import annotations

import os
import secrets

from flask_paypal_checkout.controller import CheckoutConfig, CheckoutController
from flask_paypal_checkout.exceptions import (
    CartError,
    CartNotFound,
    CheckoutError,
    PaymentAlreadyProcessed,
    ProviderError,
)
from flask_paypal_checkout.providers import DummyProvider, PaymentProvider, PayPalProvider
from flask_paypal_checkout.store import DEFAULT_LIFETIME, MemorySessionStore, SessionStore
from flask_paypal_checkout.version import __version__
from flask_paypal_checkout.views import create_blueprint

#: Provider environment, fixed at start-up.
PAYPAL_MODE = "sandbox"

__all__ = [
    "CartError",
    "CartNotFound",
    "CheckoutConfig",
    "CheckoutController",
    "CheckoutError",
    "DummyProvider",
    "MemorySessionStore",
    "PayPalCheckout",
    "PayPalProvider",
    "PaymentAlreadyProcessed",
    "PaymentProvider",
    "ProviderError",
    "SessionStore",
    "__version__",
]


def _is_quart_app(app) -> bool:
    """Return ``True`` when *app* is a :class:`quart.Quart` instance."""
    try:
        from quart import Quart

        return isinstance(app, Quart)
    except ImportError:
        return False


class PayPalCheckout:
    """Flask/Quart extension that wires a PayPal checkout into an application.

    Usage – application factory pattern::

        from flask import Flask
        from flask_paypal_checkout import PayPalCheckout

        checkout = PayPalCheckout()

        def create_app():
            app = Flask(__name__)
            checkout.init_app(app)
            return app

    Usage – direct initialisation::

        app = Flask(__name__)
        checkout = PayPalCheckout(app)

    Usage – with Quart (async)::

        from quart import Quart

        app = Quart(__name__)
        checkout = PayPalCheckout(app)   # async blueprint selected automatically

    Usage – offline, without PayPal credentials::

        from flask_paypal_checkout import DummyProvider

        checkout = PayPalCheckout(app, provider=DummyProvider())

    Routes registered under ``CHECKOUT_URL_PREFIX``:

    ``GET /``
        Home page with the cart.
    ``POST /paypal``
        ``{"cart": [{"name": ..., "price": ...}]}`` -> ``{"redirect_url": ...}``.
    ``GET /success?PayerID=...&paymentId=...``
        PayPal return URL; executes the payment.
    ``GET /cancel``
        PayPal cancel URL.

    Configuration keys (set on ``app.config``):

    ``PAYPAL_CLIENT_ID`` / ``PAYPAL_CLIENT_SECRET``
        PayPal REST credentials.  Default to the environment variables of
        the same name.
    ``CHECKOUT_RETURN_URL`` / ``CHECKOUT_CANCEL_URL``
        Absolute URLs PayPal sends the buyer back to (default:
        ``http://localhost:8880/success`` and ``/cancel``).
    ``CHECKOUT_DESCRIPTION``
        Transaction description shown by PayPal.
    ``CHECKOUT_URL_PREFIX``
        URL prefix for the blueprint (default: ``""``).
    ``PERMANENT_SESSION_LIFETIME``
        Idle lifetime of a checkout session in the default memory store.

    The PayPal client always targets the sandbox (:data:`PAYPAL_MODE`);
    live payments cannot be enabled through configuration.
    """

    def __init__(self, app=None, *, provider: PaymentProvider | None = None, store: SessionStore | None = None) -> None:
        self._provider = provider
        self._store = store
        self._controller: CheckoutController | None = None

        if app is not None:
            self.init_app(app)

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def init_app(self, app, *, provider: PaymentProvider | None = None, store: SessionStore | None = None) -> None:
        """Initialise the extension against *app* (Flask or Quart)."""
        if provider is not None:
            self._provider = provider
        if store is not None:
            self._store = store

        app.config.setdefault("PAYPAL_CLIENT_ID", os.environ.get("PAYPAL_CLIENT_ID"))
        app.config.setdefault("PAYPAL_CLIENT_SECRET", os.environ.get("PAYPAL_CLIENT_SECRET"))
        app.config.setdefault("CHECKOUT_URL_PREFIX", "")
        app.config.setdefault("CHECKOUT_RETURN_URL", None)
        app.config.setdefault("CHECKOUT_CANCEL_URL", None)
        app.config.setdefault("CHECKOUT_DESCRIPTION", None)

        # The session cookie only carries the checkout session id.
        if not app.config.get("SECRET_KEY"):
            app.config["SECRET_KEY"] = secrets.token_urlsafe(32)
        # Not marked secure so the sandbox flow works over plain http.
        app.config.setdefault("SESSION_COOKIE_SECURE", False)

        if self._provider is None:
            self._provider = PayPalProvider(
                client_id=app.config["PAYPAL_CLIENT_ID"],
                client_secret=app.config["PAYPAL_CLIENT_SECRET"],
                mode=PAYPAL_MODE,
            )
        if self._store is None:
            self._store = MemorySessionStore(
                lifetime=app.config.get("PERMANENT_SESSION_LIFETIME", DEFAULT_LIFETIME)
            )

        self._controller = CheckoutController(
            provider=self._provider,
            store=self._store,
            config=CheckoutConfig.from_mapping(app.config),
        )

        if _is_quart_app(app):
            from flask_paypal_checkout.quart_views import create_async_blueprint

            blueprint = create_async_blueprint(self)
        else:
            blueprint = create_blueprint(self)

        url_prefix = app.config["CHECKOUT_URL_PREFIX"] or None
        app.register_blueprint(blueprint, url_prefix=url_prefix)

        app.extensions["paypal_checkout"] = self

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def controller(self) -> CheckoutController:
        """The :class:`CheckoutController` serving the blueprint."""
        if self._controller is None:
            raise RuntimeError(
                "PayPalCheckout extension not initialised. Call init_app(app) first."
            )
        return self._controller

    @property
    def provider(self) -> PaymentProvider:
        return self.controller.provider

    @property
    def store(self) -> SessionStore:
        return self.controller.store

    @property
    def config(self) -> CheckoutConfig:
        return self.controller.config

    def get_cart(self, session_id: str) -> list[dict[str, str]] | None:
        """Return the stored cart for *session_id* as plain dicts, or ``None``."""
        cart = self.controller.get_cart(session_id)
        if cart is None:
            return None
        return [item.to_dict() for item in cart]
