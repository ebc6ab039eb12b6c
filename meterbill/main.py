from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from meterbill.api.billing import router as billing_router
from meterbill.api.webhooks import router as webhooks_router
from meterbill.config import Settings, settings as default_settings, validate_settings
from meterbill.errors import register_error_handlers
from meterbill.logging import configure_logging
from meterbill.middleware.security_headers import SecurityHeadersMiddleware
from meterbill.observability import ObservabilityMiddleware
from meterbill.services.billing_gateway import StripeGateway, build_gateway
from meterbill.telemetry import setup_otel
from meterbill.web_home import router as web_home_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[arg-type]
    # ── Startup ──────────────────────────────────────────
    warnings = validate_settings(app.state.settings)
    for w in warnings:
        logger.warning("Config warning: %s", w)

    logger.info("Application started (pid=%s)", os.getpid())
    yield

    # ── Shutdown ─────────────────────────────────────────
    logger.info("Application shutting down")


def create_app(
    settings: Settings | None = None, gateway: StripeGateway | None = None
) -> FastAPI:
    settings = settings or default_settings
    if gateway is None and settings.stripe_secret_key:
        gateway = build_gateway(settings)

    app = FastAPI(title="Usage-based Subscriptions API", lifespan=lifespan)
    app.state.settings = settings
    app.state.gateway = gateway

    setup_otel(app)

    # ── Middleware (order matters: last added = first executed) ──
    register_error_handlers(app)

    cors_origins = [
        o.strip()
        for o in settings.cors_origins.split(",")
        if o.strip()
    ]
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-Id"],
        )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ObservabilityMiddleware)

    app.include_router(web_home_router)
    app.include_router(billing_router)
    app.include_router(webhooks_router)

    # ── Health Checks ────────────────────────────────────

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Liveness probe; always returns ok if the process is running."""
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics() -> Response:
        data = generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    # Catch-all for the client bundle's assets; must stay after every route.
    if settings.static_dir:
        app.mount(
            "/",
            StaticFiles(directory=settings.static_dir, check_dir=False),
            name="static",
        )

    return app


configure_logging()
app = create_app()
