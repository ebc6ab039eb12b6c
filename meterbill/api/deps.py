from fastapi import HTTPException, Request

from meterbill.config import Settings
from meterbill.services.billing_gateway import StripeGateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> StripeGateway:
    gateway: StripeGateway | None = request.app.state.gateway
    if gateway is None or not gateway.is_configured():
        raise HTTPException(status_code=503, detail="Billing gateway not configured")
    return gateway
