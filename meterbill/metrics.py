from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "meterbill_http_requests_total",
    "HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "meterbill_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path", "status"],
)
REQUEST_ERRORS = Counter(
    "meterbill_http_request_errors_total",
    "HTTP requests that ended in a server error",
    ["method", "path", "status"],
)
WEBHOOK_EVENTS = Counter(
    "meterbill_webhook_events_total",
    "Stripe webhook events by type and dispatch outcome",
    ["event_type", "outcome"],
)
STRIPE_ERRORS = Counter(
    "meterbill_stripe_errors_total",
    "Stripe API errors caught by request handlers",
    ["operation"],
)
