"""Global exception handlers for the FastAPI application.

Every error leaves the API in one shape:

    {
        "error": {
            "code": "ALERT_NOT_FOUND",
            "message": "Alert not found or access denied",
            "details": {"alert_id": "..."},
            "request_id": "a1b2c3d4",
            "timestamp": "2026-01-12T12:00:00+00:00"
        }
    }

Usage:
    from signalwatch.api.exception_handlers import register_exception_handlers
    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from signalwatch.core.exceptions import ExternalServiceError, SignalWatchError
from signalwatch.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

STATUS_TO_CODE = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_REQUIRED",
    403: "ACCESS_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def get_request_id(request: Request) -> str | None:
    """Extract request ID from request state (set by RequestIDMiddleware) or headers."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return str(request_id)
    return request.headers.get("X-Request-ID")


def _log_context(request: Request, **extra: Any) -> dict[str, Any]:
    context: dict[str, Any] = {
        "path": str(request.url.path),
        "method": request.method,
        **extra,
    }
    request_id = get_request_id(request)
    if request_id:
        context["request_id"] = request_id
    return context


def build_error_response(
    error_code: str,
    message: str,
    status_code: int,
    request: Request | None = None,
    details: dict[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Build a standardized error response."""
    error_body: dict[str, Any] = {
        "code": error_code,
        "message": message,
    }

    if details:
        error_body["details"] = details

    if request:
        request_id = get_request_id(request)
        if request_id:
            error_body["request_id"] = request_id

    error_body["timestamp"] = datetime.now(UTC).isoformat()

    return JSONResponse(
        status_code=status_code,
        content={"error": error_body},
        headers=headers,
    )


async def signalwatch_exception_handler(request: Request, exc: SignalWatchError) -> JSONResponse:
    """Handle SignalWatchError and its subclasses."""
    log_context = _log_context(request, error_code=exc.error_code, status_code=exc.status_code)
    if exc.details:
        log_context["details"] = exc.details

    if exc.status_code >= 500:
        logger.error(f"Internal error: {exc.message}", extra=log_context, exc_info=True)
    elif exc.status_code >= 400:
        logger.info(f"Client error: {exc.message}", extra=log_context)

    return build_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        request=request,
        details=exc.details or None,
    )


async def external_service_exception_handler(
    request: Request, exc: ExternalServiceError
) -> JSONResponse:
    """Handle upstream failures (email delivery, place lookup)."""
    log_context = _log_context(request, service=exc.service_name, error_code=exc.error_code)
    logger.error(f"External service error ({exc.service_name}): {exc.message}", extra=log_context)

    return build_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        request=request,
        details=exc.details or None,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle standard HTTPException from FastAPI/Starlette."""
    error_code = STATUS_TO_CODE.get(exc.status_code, "ERROR")
    message = str(exc.detail) if exc.detail else "An error occurred"

    log_context = _log_context(request, status_code=exc.status_code)
    if exc.status_code >= 500:
        logger.error(f"HTTP error: {message}", extra=log_context)
    elif exc.status_code >= 400:
        logger.info(f"Client error: {message}", extra=log_context)

    return build_error_response(
        error_code=error_code,
        message=message,
        status_code=exc.status_code,
        request=request,
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation errors to field-level details."""
    errors = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) or "unknown"
        input_value = error.get("input")
        value = str(input_value)[:100] if input_value is not None else None
        errors.append(
            {
                "field": field,
                "message": error.get("msg", "Validation error"),
                "value": value,
            }
        )

    logger.info(
        "Request validation failed",
        extra=_log_context(request, error_count=len(errors)),
    )

    error_body: dict[str, Any] = {
        "code": "VALIDATION_ERROR",
        "message": "Request validation failed",
        "errors": errors,
    }
    request_id = get_request_id(request)
    if request_id:
        error_body["request_id"] = request_id
    error_body["timestamp"] = datetime.now(UTC).isoformat()

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": error_body},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler: log the traceback, return a sanitized 500."""
    logger.error(
        f"Unhandled exception: {sanitize_error(exc)}",
        extra=_log_context(request, exception_type=type(exc).__name__),
        exc_info=True,
    )
    return build_error_response(
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        request=request,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    More specific classes are registered first; Starlette resolves handlers
    by walking the exception's MRO, so subclasses always win.
    """
    app.add_exception_handler(ExternalServiceError, external_service_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SignalWatchError, signalwatch_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
