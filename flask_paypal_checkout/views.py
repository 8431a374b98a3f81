"""Blueprint with home, PayPal checkout, success and cancel routes."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from flask import Blueprint, jsonify, render_template, request, session

from flask_paypal_checkout.exceptions import CartError, ProviderError

if TYPE_CHECKING:
    from flask_paypal_checkout import PayPalCheckout

logger = logging.getLogger(__name__)

#: Key of the opaque checkout session id inside the signed session cookie.
SESSION_ID_KEY = "checkout_sid"

SUCCESS_MESSAGE = "Payment was successful!"
CANCEL_MESSAGE = "Payment has been cancelled."
TEXT_PLAIN = {"Content-Type": "text/plain; charset=utf-8"}


def ensure_session_id(sess) -> str:
    """Return the checkout session id, creating one on first use."""
    session_id = sess.get(SESSION_ID_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        sess[SESSION_ID_KEY] = session_id
    return session_id


def create_blueprint(ext: "PayPalCheckout") -> Blueprint:
    """Return a Blueprint pre-configured with the extension instance."""

    bp = Blueprint("checkout", __name__, template_folder="templates")

    @bp.route("/")
    def index():
        return render_template("index.html")

    # ------------------------------------------------------------------
    # Create – store the cart and hand back PayPal's approval URL
    # ------------------------------------------------------------------

    @bp.route("/paypal", methods=["POST"])
    def paypal():
        """Create a PayPal payment for the posted cart.

        Expects ``{"cart": [{"name": "Rose", "price": 12.5}, ...]}`` and
        answers ``{"redirect_url": ...}``; the browser navigates itself.
        """
        data = request.get_json(silent=True)
        cart = data.get("cart") if isinstance(data, dict) else None

        try:
            session_id = ensure_session_id(session)
            redirect_url = ext.controller.create_payment(session_id, cart)
        except ProviderError as exc:
            logger.error("Failed to create payment: %s", exc.response or exc)
            return jsonify({"error": "Failed to create payment.", "details": exc.details}), 400
        except CartError as exc:
            return jsonify({"error": "Invalid cart.", "details": str(exc)}), 400
        except Exception:
            logger.exception("Failed to process PayPal payment")
            return jsonify({"error": "Failed to process PayPal payment."}), 500

        return jsonify({"redirect_url": redirect_url})

    # ------------------------------------------------------------------
    # Return legs
    # ------------------------------------------------------------------

    @bp.route("/success")
    def success():
        """PayPal return URL: execute the approved payment."""
        session_id = session.get(SESSION_ID_KEY)
        payer_id = request.args.get("PayerID")
        payment_id = request.args.get("paymentId")
        logger.info("Return from PayPal for session %s, payment %s", session_id, payment_id)

        try:
            ext.controller.execute_payment(session_id, payer_id, payment_id)
        except CartError as exc:
            return str(exc), 400, TEXT_PLAIN
        except ProviderError as exc:
            logger.error("Failed to execute payment: %s", exc.response or exc)
            return "Error processing payment.", 500, TEXT_PLAIN
        except Exception:
            logger.exception("Error processing successful payment")
            return "Error processing payment.", 500, TEXT_PLAIN

        return render_template("success.html", message=SUCCESS_MESSAGE)

    @bp.route("/cancel")
    def cancel():
        """PayPal cancel URL."""
        return render_template("cancel.html", message=CANCEL_MESSAGE)

    return bp
