import logging
import time
import uuid
from typing import Any

import stripe

from meterbill.config import Settings
from meterbill.metrics import STRIPE_ERRORS
from meterbill.services.billing_gateway import StripeGateway

logger = logging.getLogger(__name__)


class UsageRecords:
    @staticmethod
    def set_minutes(
        gateway: StripeGateway, settings: Settings, minutes: int
    ) -> Any | None:
        """Overwrite the current period's usage with ``minutes``.

        Every call sends a new idempotency key; Stripe's own network retries
        of that call reuse it.
        """
        idempotency_key = str(uuid.uuid4())
        try:
            return gateway.create_usage_record(
                settings.usage_subscription_item_id,
                {
                    "quantity": minutes,
                    "timestamp": int(time.time()),
                    "action": "set",
                },
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as exc:
            STRIPE_ERRORS.labels("create_usage_record").inc()
            logger.error(
                "Usage report failed for item %s: %s",
                settings.usage_subscription_item_id,
                exc.user_message or exc,
            )
            return None


usage_records = UsageRecords()
