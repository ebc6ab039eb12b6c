"""Structured error handlers with request_id correlation.

Every error response includes a consistent envelope:
    {
        "code": "error_code",
        "message": "Human-readable message",
        "details": null | object,
        "request_id": "uuid"
    }

Payment declines are the exception: the browser client reads them as
``{"error": {"message": ...}}`` (optionally nested under ``result``), so
they keep that shape with a 402 status.
"""
from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PaymentDeclinedError(Exception):
    """Stripe refused a payment method while preparing a charge."""

    def __init__(self, message: str, nested_in_result: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.nested_in_result = nested_in_result


def _get_request_id(request: Request) -> str:
    """Extract request_id set by ObservabilityMiddleware."""
    return getattr(request.state, "request_id", "unknown")


def _error_payload(
    code: str, message: str, details: object, request_id: str
) -> dict:
    return {
        "code": code,
        "message": message,
        "details": details,
        "request_id": request_id,
    }


def register_error_handlers(app: object) -> None:
    @app.exception_handler(PaymentDeclinedError)  # type: ignore[arg-type]
    async def payment_declined_handler(
        request: Request, exc: PaymentDeclinedError
    ) -> JSONResponse:
        logger.info(
            "Payment declined on %s: %s",
            request.url.path,
            exc.message,
            extra={"request_id": _get_request_id(request)},
        )
        content: dict = {"error": {"message": exc.message}}
        if exc.nested_in_result:
            content = {"result": content}
        return JSONResponse(status_code=402, content=content)

    @app.exception_handler(HTTPException)  # type: ignore[arg-type]
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        request_id = _get_request_id(request)
        detail = exc.detail
        code = f"http_{exc.status_code}"
        message = "Request failed"
        details = None
        if isinstance(detail, dict):
            code = detail.get("code", code)
            message = detail.get("message", message)
            details = detail.get("details")
        elif isinstance(detail, str):
            message = detail
        else:
            details = detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(code, message, details, request_id),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)  # type: ignore[arg-type]
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        request_id = _get_request_id(request)
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            extra={"request_id": request_id},
        )
        return JSONResponse(
            status_code=422,
            content=_error_payload(
                "validation_error",
                "Validation error",
                jsonable_errors(exc),
                request_id,
            ),
        )

    @app.exception_handler(Exception)  # type: ignore[arg-type]
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        request_id = _get_request_id(request)
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            extra={"request_id": request_id},
        )
        return JSONResponse(
            status_code=500,
            content=_error_payload(
                "internal_error",
                "Internal server error",
                None,
                request_id,
            ),
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Drop the raw ``ctx``/``input`` values pydantic may not serialize."""
    return [
        {key: value for key, value in error.items() if key in {"type", "loc", "msg"}}
        for error in exc.errors()
    ]
