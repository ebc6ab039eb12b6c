from pydantic import BaseModel, ConfigDict, Field

from meterbill.config import PricePlan


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ── Customers ────────────────────────────────────────────


class CustomerCreate(_CamelModel):
    email: str = Field(min_length=3, max_length=512)


class PaymentMethodLookup(_CamelModel):
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)


# ── Subscriptions ────────────────────────────────────────


class SubscriptionCreate(_CamelModel):
    customer_id: str = Field(alias="customerId", min_length=1)
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)
    price_id: PricePlan = Field(alias="priceId")


class SubscriptionCancel(_CamelModel):
    subscription_id: str = Field(alias="subscriptionId", min_length=1)


class SubscriptionUpdate(_CamelModel):
    subscription_id: str = Field(alias="subscriptionId", min_length=1)
    new_price_id: PricePlan = Field(alias="newPriceId")


# ── Invoices ─────────────────────────────────────────────


class InvoiceRetry(_CamelModel):
    customer_id: str = Field(alias="customerId", min_length=1)
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)
    invoice_id: str = Field(alias="invoiceId", min_length=1)


class UpcomingInvoicePreview(_CamelModel):
    subscription_id: str = Field(alias="subscriptionId", min_length=1)
    customer_id: str = Field(alias="customerId", min_length=1)
    new_price_id: PricePlan = Field(alias="newPriceId")


# ── Usage ────────────────────────────────────────────────


class UsageReport(_CamelModel):
    minutes: int = Field(ge=0)


class UsageIncrement(_CamelModel):
    number: int | None = None
