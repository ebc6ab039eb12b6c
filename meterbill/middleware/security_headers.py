"""Security headers middleware.

Adds OWASP-recommended HTTP security headers to every response, with the
Content Security Policy opened only as far as Stripe.js needs.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

STRIPE_JS_ORIGIN = "https://js.stripe.com"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Injects security headers into every HTTP response."""

    async def dispatch(self, request: Request, call_next: object) -> Response:
        response: Response = await call_next(request)  # type: ignore[call-arg]

        # Prevent MIME-sniffing
        response.headers.setdefault("X-Content-Type-Options", "nosniff")

        # Clickjacking protection
        response.headers.setdefault("X-Frame-Options", "DENY")

        # Control referrer leakage
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )

        # Card elements use the Payment Request API from Stripe's frame
        response.headers.setdefault(
            "Permissions-Policy",
            f'camera=(), microphone=(), geolocation=(), payment=(self "{STRIPE_JS_ORIGIN}")',
        )

        response.headers.setdefault(
            "Content-Security-Policy",
            (
                "default-src 'self'; "
                f"script-src 'self' {STRIPE_JS_ORIGIN}; "
                f"frame-src {STRIPE_JS_ORIGIN} https://hooks.stripe.com; "
                "style-src 'self' 'unsafe-inline'; "
                "img-src 'self' data: https:; "
                "connect-src 'self' https://api.stripe.com; "
                "frame-ancestors 'none'; "
                "base-uri 'self'; "
                "form-action 'self'"
            ),
        )

        # HSTS only when behind TLS (proxy sets X-Forwarded-Proto)
        forwarded_proto = request.headers.get("x-forwarded-proto", "")
        if forwarded_proto == "https":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return response
