from meterbill.services.billing.customers import (
    Customers,
    PaymentMethods,
    customers,
    payment_methods,
)
from meterbill.services.billing.invoices import Invoices, invoices
from meterbill.services.billing.products import Products, products
from meterbill.services.billing.subscriptions import Subscriptions, subscriptions
from meterbill.services.billing.usage import UsageRecords, usage_records
from meterbill.services.billing.webhooks import (
    BillingEventType,
    DispatchOutcome,
    WebhookDispatcher,
    webhook_dispatcher,
)

__all__ = [
    "BillingEventType",
    "Customers",
    "DispatchOutcome",
    "Invoices",
    "PaymentMethods",
    "Products",
    "Subscriptions",
    "UsageRecords",
    "WebhookDispatcher",
    "customers",
    "invoices",
    "payment_methods",
    "products",
    "subscriptions",
    "usage_records",
    "webhook_dispatcher",
]
