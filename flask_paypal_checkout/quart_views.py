"""Async blueprint for Quart applications.

This module mirrors :mod:`flask_paypal_checkout.views` but uses ``async def``
view functions, awaits Quart's coroutine-based request helpers and runs the
blocking PayPal calls through :func:`quart.utils.run_sync`.

It is selected automatically by
:meth:`~flask_paypal_checkout.PayPalCheckout.init_app` when the application
is a :class:`quart.Quart` instance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask_paypal_checkout.exceptions import CartError, ProviderError
from flask_paypal_checkout.views import (
    CANCEL_MESSAGE,
    SESSION_ID_KEY,
    SUCCESS_MESSAGE,
    TEXT_PLAIN,
    ensure_session_id,
)

if TYPE_CHECKING:
    from flask_paypal_checkout import PayPalCheckout

logger = logging.getLogger(__name__)


def create_async_blueprint(ext: "PayPalCheckout"):
    """Return a Quart Blueprint pre-configured with the extension instance."""
    try:
        from quart import Blueprint, jsonify, render_template, request, session
        from quart.utils import run_sync
    except ImportError as exc:  # pragma: no cover
        raise ImportError(
            "quart is required for flask_paypal_checkout.quart_views. "
            "Install it with: pip install 'flask-paypal-checkout[quart]'"
        ) from exc

    bp = Blueprint("checkout", __name__, template_folder="templates")

    @bp.route("/")
    async def index():
        return await render_template("index.html")

    @bp.route("/paypal", methods=["POST"])
    async def paypal():
        """Create a PayPal payment for the posted cart."""
        data = await request.get_json(silent=True)
        cart = data.get("cart") if isinstance(data, dict) else None

        try:
            session_id = ensure_session_id(session)
            redirect_url = await run_sync(ext.controller.create_payment)(session_id, cart)
        except ProviderError as exc:
            logger.error("Failed to create payment: %s", exc.response or exc)
            return jsonify({"error": "Failed to create payment.", "details": exc.details}), 400
        except CartError as exc:
            return jsonify({"error": "Invalid cart.", "details": str(exc)}), 400
        except Exception:
            logger.exception("Failed to process PayPal payment")
            return jsonify({"error": "Failed to process PayPal payment."}), 500

        return jsonify({"redirect_url": redirect_url})

    @bp.route("/success")
    async def success():
        """PayPal return URL: execute the approved payment."""
        session_id = session.get(SESSION_ID_KEY)
        payer_id = request.args.get("PayerID")
        payment_id = request.args.get("paymentId")
        logger.info("Return from PayPal for session %s, payment %s", session_id, payment_id)

        try:
            await run_sync(ext.controller.execute_payment)(session_id, payer_id, payment_id)
        except CartError as exc:
            return str(exc), 400, TEXT_PLAIN
        except ProviderError as exc:
            logger.error("Failed to execute payment: %s", exc.response or exc)
            return "Error processing payment.", 500, TEXT_PLAIN
        except Exception:
            logger.exception("Error processing successful payment")
            return "Error processing payment.", 500, TEXT_PLAIN

        return await render_template("success.html", message=SUCCESS_MESSAGE)

    @bp.route("/cancel")
    async def cancel():
        """PayPal cancel URL."""
        return await render_template("cancel.html", message=CANCEL_MESSAGE)

    return bp
