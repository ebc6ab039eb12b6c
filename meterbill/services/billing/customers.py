import logging
from typing import Any

import stripe

from meterbill.errors import PaymentDeclinedError
from meterbill.services.billing_gateway import StripeGateway

logger = logging.getLogger(__name__)


def declined(exc: stripe.StripeError, nested_in_result: bool = False) -> PaymentDeclinedError:
    """Translate a Stripe rejection into the 402 error the client expects."""
    message = exc.user_message or str(exc)
    return PaymentDeclinedError(message, nested_in_result=nested_in_result)


class Customers:
    @staticmethod
    def create(gateway: StripeGateway, email: str) -> Any:
        return gateway.create_customer(email)

    @staticmethod
    def attach_payment_method(
        gateway: StripeGateway, customer_id: str, payment_method_id: str
    ) -> None:
        # Stripe validates the card on attach; declines surface here.
        gateway.attach_payment_method(payment_method_id, customer_id)
        logger.info("Attached %s to %s", payment_method_id, customer_id)

    @staticmethod
    def set_default_payment_method(
        gateway: StripeGateway, customer_id: str, payment_method_id: str
    ) -> None:
        gateway.set_default_payment_method(customer_id, payment_method_id)


class PaymentMethods:
    @staticmethod
    def get(gateway: StripeGateway, payment_method_id: str) -> Any:
        return gateway.retrieve_payment_method(payment_method_id)


customers = Customers()
payment_methods = PaymentMethods()
