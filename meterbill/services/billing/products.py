import logging
from typing import Any

import stripe

from meterbill.metrics import STRIPE_ERRORS
from meterbill.services.billing_gateway import StripeGateway

logger = logging.getLogger(__name__)

DEMO_PRODUCT = {
    "name": "Cour De Jean Maths",
    "description": "un produit pour announce de jean gautier ACCT",
    "metadata": {
        "seoId": (
            "developpeur-je-donne-des-cours-de-mathematiques-dinformatique"
            "-pour-tout-niveaux-et-pour-tout-mindset"
        ),
    },
}

# First 240 minutes for a flat 100.00 EUR, then 22.00 EUR per minute.
INCLUDED_MINUTES = 240
DEMO_PRICE_TIERS = [
    {"flat_amount": 10000, "unit_amount_decimal": "0", "up_to": INCLUDED_MINUTES},
    {"unit_amount": 2200, "up_to": "inf"},
]


def metered_price_params(product_id: str) -> dict[str, Any]:
    return {
        "currency": "eur",
        "recurring": {
            "interval": "month",
            "usage_type": "metered",
            "aggregate_usage": "sum",
        },
        "billing_scheme": "tiered",
        "tiers": DEMO_PRICE_TIERS,
        "tiers_mode": "graduated",
        "product": product_id,
        "metadata": {
            "availableMinutes": INCLUDED_MINUTES,
            "availableMonths": 6,
        },
    }


class Products:
    @staticmethod
    def create_with_metered_price(gateway: StripeGateway) -> Any | None:
        """Create the demo product and its graduated, metered monthly price.

        A failed product creation propagates; a failed price creation is
        logged and reported as ``None``.
        """
        product = gateway.create_product(DEMO_PRODUCT)
        try:
            return gateway.create_price(metered_price_params(product["id"]))
        except stripe.StripeError as exc:
            STRIPE_ERRORS.labels("create_price").inc()
            logger.error("Price creation failed: %s", exc.user_message or exc)
            return None


products = Products()
