import logging
from typing import Any

import stripe

from meterbill.config import PricePlan, Settings
from meterbill.metrics import STRIPE_ERRORS
from meterbill.services.billing.customers import customers, declined
from meterbill.services.billing.subscriptions import first_item_id
from meterbill.services.billing_gateway import StripeGateway

logger = logging.getLogger(__name__)


class Invoices:
    @staticmethod
    def retry(
        gateway: StripeGateway,
        customer_id: str,
        payment_method_id: str,
        invoice_id: str,
    ) -> Any:
        """Switch the customer to a new card, then reload the invoice to pay."""
        try:
            customers.attach_payment_method(gateway, customer_id, payment_method_id)
            customers.set_default_payment_method(
                gateway, customer_id, payment_method_id
            )
        except stripe.StripeError as exc:
            raise declined(exc, nested_in_result=True) from exc
        return gateway.retrieve_invoice(invoice_id, expand=["payment_intent"])

    @staticmethod
    def preview_upcoming(
        gateway: StripeGateway,
        settings: Settings,
        customer_id: str,
        subscription_id: str,
        plan: PricePlan,
    ) -> Any:
        """Preview the prorated invoice for moving a subscription to ``plan``.

        The current first item is dropped with its metered usage cleared and
        the new price is added in its place.
        """
        subscription = gateway.retrieve_subscription(subscription_id)
        return gateway.retrieve_upcoming_invoice(
            {
                "subscription_prorate": True,
                "customer": customer_id,
                "subscription": subscription_id,
                "subscription_items": [
                    {
                        "id": first_item_id(subscription),
                        "clear_usage": True,
                        "deleted": True,
                    },
                    {"price": settings.price_for(plan), "deleted": False},
                ],
            }
        )

    @staticmethod
    def create_discounted(gateway: StripeGateway, settings: Settings) -> Any | None:
        """Bill the demo customer once for the invoice price, with the coupon applied.

        The pending invoice item is swept into a new invoice which is then
        paid immediately. Stripe errors are logged and reported as ``None``.
        """
        try:
            gateway.create_invoice_item(
                {
                    "customer": settings.connect_customer_id,
                    "price": settings.invoice_price_id,
                }
            )
            invoice = gateway.create_invoice(
                {
                    "customer": settings.connect_customer_id,
                    "auto_advance": True,
                    "collection_method": "charge_automatically",
                    "discounts": [{"coupon": settings.invoice_coupon_id}],
                }
            )
            return gateway.pay_invoice(invoice["id"])
        except stripe.StripeError as exc:
            STRIPE_ERRORS.labels("create_discounted_invoice").inc()
            logger.error("Discounted invoice failed: %s", exc.user_message or exc)
            return None


invoices = Invoices()
