"""Gunicorn configuration for production deployment.

Usage:
    gunicorn -c gunicorn.conf.py meterbill.main:app
"""
from __future__ import annotations

import multiprocessing
import os
import sys

# ── Server socket ────────────────────────────────────────
bind = os.getenv("GUNICORN_BIND", f"0.0.0.0:{os.getenv('PORT', '4242')}")

# ── Worker processes ─────────────────────────────────────
# Rule of thumb: 2-4 workers per CPU core for I/O-bound apps
workers = int(os.getenv("GUNICORN_WORKERS", str(multiprocessing.cpu_count() * 2 + 1)))
worker_class = "uvicorn.workers.UvicornWorker"
worker_tmp_dir = "/dev/shm"  # RAM-backed tmpdir for heartbeat (prevents disk I/O issues)

# ── Timeouts ─────────────────────────────────────────────
# Each request waits on one or more sequential Stripe calls
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# ── Request limits ───────────────────────────────────────
max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("GUNICORN_MAX_REQUESTS_JITTER", "50"))

# ── Preloading ───────────────────────────────────────────
preload_app = os.getenv("GUNICORN_PRELOAD", "false").lower() == "true"

# ── Logging ──────────────────────────────────────────────
accesslog = os.getenv("GUNICORN_ACCESSLOG", "-")  # stdout
errorlog = os.getenv("GUNICORN_ERRORLOG", "-")    # stderr
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# ── Process naming ───────────────────────────────────────
proc_name = "meterbill"


# ── Server hooks ─────────────────────────────────────────


def on_starting(server) -> None:
    """Refuse to start, before any socket is bound, when required config is missing."""
    from meterbill.config import missing_settings, settings

    missing = missing_settings(settings)
    if not missing:
        return
    server.log.error("The .env file is not configured.")
    for message in missing:
        server.log.error(message)
    sys.exit(1)
