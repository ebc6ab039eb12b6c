"""Dispatch of verified Stripe billing events.

Handlers are placeholders: this service keeps no local copy of billing
state, so each one only records that the event arrived. Unknown event
types are logged and counted rather than dropped silently.
"""
import enum
import logging
from collections.abc import Callable
from typing import Any

from meterbill.metrics import WEBHOOK_EVENTS

logger = logging.getLogger(__name__)


class BillingEventType(str, enum.Enum):
    invoice_paid = "invoice.paid"
    invoice_payment_failed = "invoice.payment_failed"
    invoice_finalized = "invoice.finalized"
    subscription_deleted = "customer.subscription.deleted"
    subscription_trial_will_end = "customer.subscription.trial_will_end"


class DispatchOutcome(str, enum.Enum):
    handled = "handled"
    unhandled = "unhandled"
    error = "error"


EventHandler = Callable[[Any, Any], None]


def _request_id(event: Any) -> str | None:
    request = event.get("request")
    # API versions before 2017-05-25 send the request id as a bare string
    if isinstance(request, dict):
        return request.get("id")
    return request


class WebhookDispatcher:
    def __init__(self) -> None:
        self._handlers: dict[BillingEventType, EventHandler] = {}

    def register(self, event_type: BillingEventType) -> Callable[[EventHandler], EventHandler]:
        def decorator(handler: EventHandler) -> EventHandler:
            self._handlers[event_type] = handler
            return handler

        return decorator

    def dispatch(self, event: Any) -> DispatchOutcome:
        """Route a verified event to its handler.

        Handler failures are logged and reported as ``DispatchOutcome.error``
        instead of raised: Stripe redelivers on any non-2xx answer.
        """
        raw_type = event["type"]
        data_object = event["data"]["object"]
        try:
            event_type = BillingEventType(raw_type)
        except ValueError:
            logger.info(
                "Unhandled webhook event type %s",
                raw_type,
                extra={"event_type": raw_type},
            )
            WEBHOOK_EVENTS.labels(raw_type, DispatchOutcome.unhandled.value).inc()
            return DispatchOutcome.unhandled

        handler = self._handlers[event_type]
        try:
            handler(event, data_object)
        except Exception:
            logger.exception(
                "Webhook handler failed for %s",
                raw_type,
                extra={"event_type": raw_type},
            )
            WEBHOOK_EVENTS.labels(raw_type, DispatchOutcome.error.value).inc()
            return DispatchOutcome.error
        WEBHOOK_EVENTS.labels(raw_type, DispatchOutcome.handled.value).inc()
        return DispatchOutcome.handled


webhook_dispatcher = WebhookDispatcher()


@webhook_dispatcher.register(BillingEventType.invoice_paid)
def handle_invoice_paid(event: Any, invoice: Any) -> None:
    # Provision access once the invoice (or the first one after a trial) is paid.
    logger.info("Invoice %s paid", invoice.get("id"), extra={"event_type": event["type"]})


@webhook_dispatcher.register(BillingEventType.invoice_payment_failed)
def handle_invoice_payment_failed(event: Any, invoice: Any) -> None:
    # The subscription is now past_due; the customer needs a new card.
    logger.info(
        "Invoice %s payment failed",
        invoice.get("id"),
        extra={"event_type": event["type"]},
    )


@webhook_dispatcher.register(BillingEventType.invoice_finalized)
def handle_invoice_finalized(event: Any, invoice: Any) -> None:
    logger.info(
        "Invoice %s finalized", invoice.get("id"), extra={"event_type": event["type"]}
    )


@webhook_dispatcher.register(BillingEventType.subscription_deleted)
def handle_subscription_deleted(event: Any, subscription: Any) -> None:
    if _request_id(event) is not None:
        logger.info(
            "Subscription %s cancelled by API request",
            subscription.get("id"),
            extra={"event_type": event["type"]},
        )
    else:
        logger.info(
            "Subscription %s cancelled automatically",
            subscription.get("id"),
            extra={"event_type": event["type"]},
        )


@webhook_dispatcher.register(BillingEventType.subscription_trial_will_end)
def handle_trial_will_end(event: Any, subscription: Any) -> None:
    logger.info(
        "Trial ending soon for subscription %s",
        subscription.get("id"),
        extra={"event_type": event["type"]},
    )
