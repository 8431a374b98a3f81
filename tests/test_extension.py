"""Tests for the PayPalCheckout extension initialisation."""

from datetime import timedelta

import pytest
from flask import Flask

from flask_paypal_checkout import (
    DummyProvider,
    MemorySessionStore,
    PayPalCheckout,
    PayPalProvider,
)
from flask_paypal_checkout.app import PORT, create_app
from flask_paypal_checkout.version import __version__


def test_version_string():
    """__version__ is a non-empty string."""
    assert isinstance(__version__, str)
    assert __version__


def test_init_direct():
    """Extension initialised directly with app."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    ext = PayPalCheckout(app, provider=DummyProvider())

    assert app.extensions["paypal_checkout"] is ext


def test_init_app_factory():
    """Extension uses the application-factory pattern."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    provider = DummyProvider()
    store = MemorySessionStore()

    ext = PayPalCheckout()
    ext.init_app(app, provider=provider, store=store)

    assert app.extensions["paypal_checkout"] is ext
    assert ext.provider is provider
    assert ext.store is store


def test_controller_before_init_raises():
    ext = PayPalCheckout()
    with pytest.raises(RuntimeError, match="not initialised"):
        ext.controller


def test_default_provider_is_paypal_from_config(monkeypatch):
    monkeypatch.setenv("PAYPAL_CLIENT_ID", "env-id")
    monkeypatch.setenv("PAYPAL_CLIENT_SECRET", "env-secret")
    app = Flask(__name__)
    ext = PayPalCheckout(app)

    assert isinstance(ext.provider, PayPalProvider)
    assert ext.provider.mode == "sandbox"
    assert ext.provider.api.client_id == "env-id"
    assert ext.provider.api.client_secret == "env-secret"


def test_config_overrides_environment(monkeypatch):
    monkeypatch.setenv("PAYPAL_CLIENT_ID", "env-id")
    app = Flask(__name__)
    app.config["PAYPAL_CLIENT_ID"] = "config-id"
    app.config["PAYPAL_CLIENT_SECRET"] = "config-secret"
    ext = PayPalCheckout(app)

    assert ext.provider.api.client_id == "config-id"


def test_config_defaults():
    app = Flask(__name__)
    ext = PayPalCheckout(app, provider=DummyProvider())

    assert app.config["CHECKOUT_URL_PREFIX"] == ""
    assert app.config["SESSION_COOKIE_SECURE"] is False
    assert app.config["SECRET_KEY"]
    assert ext.config.return_url == "http://localhost:8880/success"
    assert ext.config.cancel_url == "http://localhost:8880/cancel"


def test_existing_secret_key_is_kept():
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "mine"
    PayPalCheckout(app, provider=DummyProvider())
    assert app.config["SECRET_KEY"] == "mine"


def test_checkout_urls_from_config():
    app = Flask(__name__)
    app.config["CHECKOUT_RETURN_URL"] = "https://shop.example.com/success"
    app.config["CHECKOUT_CANCEL_URL"] = "https://shop.example.com/cancel"
    app.config["CHECKOUT_DESCRIPTION"] = "Tulips"
    provider = DummyProvider()
    PayPalCheckout(app, provider=provider)

    app.test_client().post("/paypal", json={"cart": [{"name": "Tulip", "price": 8}]})

    request = provider.created[0]
    assert request["redirect_urls"] == {
        "return_url": "https://shop.example.com/success",
        "cancel_url": "https://shop.example.com/cancel",
    }
    assert request["transactions"][0]["description"] == "Tulips"


def test_url_prefix():
    app = Flask(__name__)
    app.config["CHECKOUT_URL_PREFIX"] = "/shop"
    PayPalCheckout(app, provider=DummyProvider())

    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert "/shop/paypal" in rules
    assert "/shop/success" in rules
    assert "/shop/cancel" in rules


def test_create_app_factory(monkeypatch):
    monkeypatch.setenv("PAYPAL_CLIENT_ID", "env-id")
    monkeypatch.setenv("PAYPAL_CLIENT_SECRET", "env-secret")
    app = create_app({"TESTING": True})

    ext = app.extensions["paypal_checkout"]
    assert isinstance(ext.provider, PayPalProvider)
    assert ext.provider.mode == "sandbox"
    assert PORT == 8880


def test_create_app_with_provider():
    provider = DummyProvider()
    app = create_app({"TESTING": True}, provider=provider)
    resp = app.test_client().post("/paypal", json={"cart": [{"name": "Rose", "price": 12.5}]})
    assert resp.status_code == 200
    assert len(provider.created) == 1


def test_paypal_mode_is_always_sandbox():
    app = Flask(__name__)
    app.config["PAYPAL_MODE"] = "live"
    ext = PayPalCheckout(app)

    assert ext.provider.mode == "sandbox"
    assert ext.provider.api.mode == "sandbox"


def test_default_store_uses_session_lifetime():
    app = Flask(__name__)
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(minutes=30)
    ext = PayPalCheckout(app, provider=DummyProvider())

    assert isinstance(ext.store, MemorySessionStore)
    assert ext.store.lifetime == 1800.0
