"""Stand-alone checkout server.

Run with::

    python -m flask_paypal_checkout.app

``PAYPAL_CLIENT_ID`` and ``PAYPAL_CLIENT_SECRET`` are read from the
environment or from a ``.env`` file in the working directory.  The server
talks to the PayPal sandbox and listens on http://localhost:8880.
"""

import logging

from dotenv import load_dotenv
from flask import Flask

from flask_paypal_checkout import PayPalCheckout

PORT = 8880


def create_app(config: dict | None = None, *, provider=None) -> Flask:
    """Application factory."""
    load_dotenv()

    app = Flask(__name__)
    if config:
        app.config.update(config)
    PayPalCheckout(app, provider=provider)
    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    logging.getLogger(__name__).info("Server is running on port %d", PORT)
    app.run(port=PORT)


if __name__ == "__main__":
    main()
