import logging
from typing import Any

import stripe

from meterbill.config import PricePlan, Settings
from meterbill.metrics import STRIPE_ERRORS
from meterbill.services.billing.customers import customers, declined
from meterbill.services.billing_gateway import StripeGateway

logger = logging.getLogger(__name__)

CONNECT_SUBSCRIPTION_DESCRIPTION = "un produit pour announce de jean gautier ACCT"
CONNECT_SUBSCRIPTION_METADATA = {
    "seoId": (
        "developpeur-je-donne-des-cours-de-mathematiques-dinformatique"
        "-pour-tout-niveaux-et-pour-tout-mindset"
    ),
    "teacherId": "J-J",
    "announceId": "J-J-announce",
}


def first_item_id(subscription: Any) -> str:
    return subscription["items"]["data"][0]["id"]


class Subscriptions:
    @staticmethod
    def create(
        gateway: StripeGateway,
        settings: Settings,
        customer_id: str,
        payment_method_id: str,
        plan: PricePlan,
    ) -> Any:
        try:
            customers.attach_payment_method(gateway, customer_id, payment_method_id)
        except stripe.StripeError as exc:
            raise declined(exc) from exc
        customers.set_default_payment_method(gateway, customer_id, payment_method_id)
        return gateway.create_subscription(
            {
                "customer": customer_id,
                "items": [{"price": settings.price_for(plan)}],
                "expand": ["latest_invoice.payment_intent", "pending_setup_intent"],
            }
        )

    @staticmethod
    def update(
        gateway: StripeGateway,
        settings: Settings,
        subscription_id: str,
        plan: PricePlan,
    ) -> Any:
        """Swap the first item to a new plan and undo any pending cancellation."""
        subscription = gateway.retrieve_subscription(subscription_id)
        return gateway.update_subscription(
            subscription_id,
            {
                "cancel_at_period_end": False,
                "items": [
                    {
                        "id": first_item_id(subscription),
                        "price": settings.price_for(plan),
                    }
                ],
            },
        )

    @staticmethod
    def cancel(gateway: StripeGateway, subscription_id: str) -> Any:
        return gateway.cancel_subscription(subscription_id)

    @staticmethod
    def create_connect_subscription(
        gateway: StripeGateway, settings: Settings
    ) -> Any | None:
        """Subscribe the demo customer to the Connect price.

        The platform keeps ``application_fee_percent`` and the rest is
        transferred to the connected account. Stripe errors are logged and
        reported as ``None``.
        """
        try:
            return gateway.create_subscription(
                {
                    "customer": settings.connect_customer_id,
                    "items": [{"price": settings.connect_price_id}],
                    "description": CONNECT_SUBSCRIPTION_DESCRIPTION,
                    "metadata": CONNECT_SUBSCRIPTION_METADATA,
                    "payment_behavior": "error_if_incomplete",
                    "cancel_at_period_end": True,
                    "application_fee_percent": settings.connect_application_fee_percent,
                    "collection_method": "charge_automatically",
                    "cancel_at": settings.connect_cancel_at,
                    "proration_behavior": "create_prorations",
                    # transfer_data.amount must stay unset alongside application_fee_percent
                    "transfer_data": {"destination": settings.connect_account_id},
                }
            )
        except stripe.StripeError as exc:
            STRIPE_ERRORS.labels("create_connect_subscription").inc()
            logger.error("Connect subscription failed: %s", exc.user_message or exc)
            return None


subscriptions = Subscriptions()
