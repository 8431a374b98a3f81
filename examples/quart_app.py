"""Quart async app using flask-paypal-checkout.

Requires the quart extra::

    pip install "flask-paypal-checkout[quart]"

Run with::

    PAYPAL_CLIENT_ID=... PAYPAL_CLIENT_SECRET=... python examples/quart_app.py

Then use the same endpoints as the Flask version:

    curl -c cookies.txt -X POST http://localhost:8880/paypal \\
         -H "Content-Type: application/json" \\
         -d '{"cart": [{"name": "Rose", "price": 12.50}]}'
"""

from quart import Quart

from flask_paypal_checkout import PayPalCheckout

app = Quart(__name__)

# PayPalCheckout detects Quart and registers the async blueprint automatically
ext = PayPalCheckout(app)

if __name__ == "__main__":
    app.run(port=8880, debug=True)
