"""Billing API routes called by the browser client.

Route paths and camelCase payloads match what the bundled client sends.
"""
from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import Response

from meterbill.api.deps import get_gateway, get_settings
from meterbill.config import Settings
from meterbill.schemas.billing import (
    CustomerCreate,
    InvoiceRetry,
    PaymentMethodLookup,
    SubscriptionCancel,
    SubscriptionCreate,
    SubscriptionUpdate,
    UpcomingInvoicePreview,
    UsageIncrement,
    UsageReport,
)
from meterbill.services import billing as billing_service
from meterbill.services.billing_gateway import StripeGateway

router = APIRouter(tags=["billing"])


def _empty_ok() -> Response:
    # Logged-only Stripe failures answer 200 with an empty body.
    return Response(status_code=200)


# ── Customers ────────────────────────────────────────────


@router.post("/create-customer")
def create_customer(
    payload: CustomerCreate, gateway: StripeGateway = Depends(get_gateway)
):
    customer = billing_service.customers.create(gateway, payload.email)
    return {"customer": customer}


@router.post("/retrieve-customer-payment-method")
def retrieve_customer_payment_method(
    payload: PaymentMethodLookup, gateway: StripeGateway = Depends(get_gateway)
):
    return billing_service.payment_methods.get(gateway, payload.payment_method_id)


# ── Subscriptions ────────────────────────────────────────


@router.post("/create-subscription")
def create_subscription(
    payload: SubscriptionCreate,
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    return billing_service.subscriptions.create(
        gateway,
        settings,
        payload.customer_id,
        payload.payment_method_id,
        payload.price_id,
    )


@router.post("/update-subscription")
def update_subscription(
    payload: SubscriptionUpdate,
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    return billing_service.subscriptions.update(
        gateway, settings, payload.subscription_id, payload.new_price_id
    )


@router.post("/cancel-subscription")
def cancel_subscription(
    payload: SubscriptionCancel, gateway: StripeGateway = Depends(get_gateway)
):
    return billing_service.subscriptions.cancel(gateway, payload.subscription_id)


@router.post("/create-subscription-between-J-and-J")
def create_connect_subscription(
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    subscription = billing_service.subscriptions.create_connect_subscription(
        gateway, settings
    )
    if subscription is None:
        return _empty_ok()
    return {"subscription": subscription}


# ── Invoices ─────────────────────────────────────────────


@router.post("/retry-invoice")
def retry_invoice(payload: InvoiceRetry, gateway: StripeGateway = Depends(get_gateway)):
    return billing_service.invoices.retry(
        gateway, payload.customer_id, payload.payment_method_id, payload.invoice_id
    )


@router.post("/retrieve-upcoming-invoice")
def retrieve_upcoming_invoice(
    payload: UpcomingInvoicePreview,
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    return billing_service.invoices.preview_upcoming(
        gateway,
        settings,
        payload.customer_id,
        payload.subscription_id,
        payload.new_price_id,
    )


@router.post("/create-invoice-dmr")
def create_discounted_invoice(
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    invoice = billing_service.invoices.create_discounted(gateway, settings)
    if invoice is None:
        return _empty_ok()
    return {"invoice": invoice}


# ── Products & usage ─────────────────────────────────────


@router.post("/create-product-and-prices")
def create_product_and_prices(gateway: StripeGateway = Depends(get_gateway)):
    price = billing_service.products.create_with_metered_price(gateway)
    if price is None:
        return _empty_ok()
    return {"price": price}


@router.post("/use-product")
def use_product(
    payload: UsageReport,
    gateway: StripeGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    usage_record = billing_service.usage_records.set_minutes(
        gateway, settings, payload.minutes
    )
    if usage_record is None:
        return _empty_ok()
    return {"usageRecord": usage_record}


@router.post("/report-usage")
def report_usage(payload: UsageIncrement | None = None):
    raise HTTPException(status_code=501, detail="Usage reporting is not implemented")
