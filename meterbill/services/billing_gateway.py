"""Stripe billing gateway integration."""

import logging
from typing import Any

import stripe

from meterbill.config import Settings

logger = logging.getLogger(__name__)


class StripeGateway:
    """Thin wrapper around the Stripe API client.

    Every method is a single Stripe call; composition lives in
    ``meterbill.services.billing``.
    """

    def __init__(self, secret_key: str, api_version: str | None = None) -> None:
        self._secret_key = secret_key
        self._client = stripe.StripeClient(secret_key, stripe_version=api_version)

    def is_configured(self) -> bool:
        return bool(self._secret_key)

    # ── Customers & payment methods ──────────────────────

    def create_customer(self, email: str) -> Any:
        customer = self._client.customers.create(params={"email": email})
        logger.info("Created Stripe customer: %s", customer["id"])
        return customer

    def attach_payment_method(self, payment_method_id: str, customer_id: str) -> Any:
        return self._client.payment_methods.attach(
            payment_method_id, params={"customer": customer_id}
        )

    def set_default_payment_method(
        self, customer_id: str, payment_method_id: str
    ) -> Any:
        return self._client.customers.update(
            customer_id,
            params={"invoice_settings": {"default_payment_method": payment_method_id}},
        )

    def retrieve_payment_method(self, payment_method_id: str) -> Any:
        return self._client.payment_methods.retrieve(payment_method_id)

    # ── Products & prices ────────────────────────────────

    def create_product(self, params: dict[str, Any]) -> Any:
        product = self._client.products.create(params=params)
        logger.info("Created Stripe product: %s", product["id"])
        return product

    def create_price(self, params: dict[str, Any]) -> Any:
        price = self._client.prices.create(params=params)
        logger.info("Created Stripe price: %s", price["id"])
        return price

    # ── Subscriptions ────────────────────────────────────

    def create_subscription(self, params: dict[str, Any]) -> Any:
        subscription = self._client.subscriptions.create(params=params)
        logger.info("Created Stripe subscription: %s", subscription["id"])
        return subscription

    def retrieve_subscription(self, subscription_id: str) -> Any:
        return self._client.subscriptions.retrieve(subscription_id)

    def update_subscription(self, subscription_id: str, params: dict[str, Any]) -> Any:
        subscription = self._client.subscriptions.update(subscription_id, params=params)
        logger.info("Updated Stripe subscription: %s", subscription_id)
        return subscription

    def cancel_subscription(self, subscription_id: str) -> Any:
        subscription = self._client.subscriptions.cancel(subscription_id)
        logger.info("Cancelled Stripe subscription: %s", subscription_id)
        return subscription

    def create_usage_record(
        self,
        subscription_item_id: str,
        params: dict[str, Any],
        idempotency_key: str,
    ) -> Any:
        return self._client.subscription_items.usage_records.create(
            subscription_item_id,
            params=params,
            options={"idempotency_key": idempotency_key},
        )

    # ── Invoices ─────────────────────────────────────────

    def retrieve_invoice(self, invoice_id: str, expand: list[str] | None = None) -> Any:
        params: dict[str, Any] = {}
        if expand:
            params["expand"] = expand
        return self._client.invoices.retrieve(invoice_id, params=params)

    def retrieve_upcoming_invoice(self, params: dict[str, Any]) -> Any:
        return self._client.invoices.upcoming(params=params)

    def create_invoice_item(self, params: dict[str, Any]) -> Any:
        return self._client.invoice_items.create(params=params)

    def create_invoice(self, params: dict[str, Any]) -> Any:
        invoice = self._client.invoices.create(params=params)
        logger.info("Created Stripe invoice: %s", invoice["id"])
        return invoice

    def pay_invoice(self, invoice_id: str) -> Any:
        return self._client.invoices.pay(invoice_id)

    # ── Webhook ──────────────────────────────────────────

    def construct_event(self, payload: bytes, signature: str, secret: str) -> Any:
        """Verify a webhook signature and parse the event.

        Raises ``stripe.SignatureVerificationError`` on a bad signature and
        ``ValueError`` on a payload that is not valid JSON.
        """
        return self._client.construct_event(payload, signature, secret)


def build_gateway(s: Settings) -> StripeGateway:
    return StripeGateway(s.stripe_secret_key, api_version=s.stripe_api_version)
