"""Basic Flask app using flask-paypal-checkout with DummyProvider.

Run with::

    python examples/basic_app.py

Then open http://localhost:5000/ in your browser or use curl:

    # Create a payment (returns redirect_url)
    curl -c cookies.txt -X POST http://localhost:5000/paypal \\
         -H "Content-Type: application/json" \\
         -d '{"cart": [{"name": "Rose", "price": 12.50}]}'

    # Simulate PayPal sending the buyer back
    curl -b cookies.txt "http://localhost:5000/success?PayerID=P1&paymentId=PAY-DUMMY-1"
"""

from flask import Flask

from flask_paypal_checkout import DummyProvider, PayPalCheckout

app = Flask(__name__)
app.config["CHECKOUT_RETURN_URL"] = "http://localhost:5000/success"
app.config["CHECKOUT_CANCEL_URL"] = "http://localhost:5000/cancel"

# DummyProvider never talks to PayPal – no credentials needed
ext = PayPalCheckout(app, provider=DummyProvider())

if __name__ == "__main__":
    app.run(debug=True)
