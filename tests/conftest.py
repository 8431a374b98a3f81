"""Shared pytest fixtures for flask-paypal-checkout tests."""

import pytest
from flask import Flask

from flask_paypal_checkout import DummyProvider, PayPalCheckout
from flask_paypal_checkout.views import SESSION_ID_KEY


@pytest.fixture
def provider():
    """Offline provider recording every create/execute call."""
    return DummyProvider()


@pytest.fixture
def app(provider):
    """Flask app configured with DummyProvider and test settings."""
    application = Flask(__name__)
    application.config["TESTING"] = True
    application.config["SECRET_KEY"] = "test-secret"

    PayPalCheckout(application, provider=provider)

    yield application


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def ext(app):
    """The PayPalCheckout extension instance."""
    return app.extensions["paypal_checkout"]


@pytest.fixture
def session_id(client):
    """Return a callable reading the checkout session id from the client's cookie."""

    def _read():
        with client.session_transaction() as sess:
            return sess.get(SESSION_ID_KEY)

    return _read
