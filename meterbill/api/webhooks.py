"""Stripe webhook route."""

import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.responses import Response

from meterbill.api.deps import get_gateway, get_settings
from meterbill.config import Settings
from meterbill.services.billing import webhook_dispatcher
from meterbill.services.billing_gateway import StripeGateway

logger = logging.getLogger(__name__)
router = APIRouter(tags=["webhooks"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Handle Stripe billing events; no auth required, signature verified."""
    if not settings.stripe_webhook_secret:
        raise HTTPException(status_code=503, detail="Webhook secret not configured")

    # Signature covers the exact bytes Stripe sent, so the body is never parsed first.
    body = await request.body()
    signature = request.headers.get("stripe-signature", "")
    try:
        event = gateway.construct_event(body, signature, settings.stripe_webhook_secret)
    except (ValueError, stripe.SignatureVerificationError) as exc:
        logger.warning(
            "Webhook signature verification failed: %s",
            exc,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        raise HTTPException(status_code=400, detail="Invalid signature") from exc

    outcome = webhook_dispatcher.dispatch(event)
    logger.info(
        "Webhook event %s: %s",
        event["id"],
        outcome.value,
        extra={"event_type": event["type"]},
    )
    return Response(status_code=200)
