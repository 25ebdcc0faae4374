"""Exception hierarchy for the SignalWatch service.

Every application error carries a machine-readable code, an HTTP status code
and optional structured details, so the API layer can render a uniform error
body without knowing which component raised it.
"""

from __future__ import annotations

from typing import Any


class SignalWatchError(Exception):
    """Base exception for all application-specific errors."""

    default_message: str = "An unexpected error occurred"
    default_error_code: str = "INTERNAL_ERROR"
    default_status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.status_code = status_code or self.default_status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Validation Errors (400)
class ValidationError(SignalWatchError):
    default_message = "Validation failed"
    default_error_code = "VALIDATION_ERROR"
    default_status_code = 400


class InvalidInputError(ValidationError):
    default_message = "Invalid input provided"
    default_error_code = "INVALID_INPUT"

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if field:
            details["field"] = field
        if value is not None:
            str_value = str(value)
            details["value"] = str_value[:100]
        super().__init__(message, details=details, **kwargs)


class MissingFieldError(InvalidInputError):
    default_error_code = "MISSING_FIELD"

    def __init__(self, field: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"{field} is required", field=field, **kwargs)


# Auth Errors
class AuthenticationError(SignalWatchError):
    default_message = "Authentication required"
    default_error_code = "AUTHENTICATION_REQUIRED"
    default_status_code = 401


class AuthorizationError(SignalWatchError):
    default_message = "Access denied"
    default_error_code = "ACCESS_DENIED"
    default_status_code = 403


# Not Found Errors (404)
class NotFoundError(SignalWatchError):
    default_message = "Resource not found"
    default_error_code = "NOT_FOUND"
    default_status_code = 404


class DeviceNotFoundError(NotFoundError):
    default_error_code = "DEVICE_NOT_FOUND"

    def __init__(self, device_id: str, message: str | None = None, **kwargs: Any) -> None:
        if message is None:
            message = "Device not found or not owned by user"
        details = kwargs.pop("details", {}) or {}
        details["device_id"] = device_id
        super().__init__(message, details=details, **kwargs)


class AlertNotFoundError(NotFoundError):
    """Raised for missing alerts and for alerts owned by someone else.

    Both cases share one message so callers cannot probe for alert ids.
    """

    default_error_code = "ALERT_NOT_FOUND"

    def __init__(self, alert_id: str, message: str | None = None, **kwargs: Any) -> None:
        if message is None:
            message = "Alert not found or access denied"
        details = kwargs.pop("details", {}) or {}
        details["alert_id"] = alert_id
        super().__init__(message, details=details, **kwargs)


class ConnectivitySampleNotFoundError(NotFoundError):
    default_error_code = "CONNECTIVITY_LOG_NOT_FOUND"

    def __init__(self, sample_id: str, message: str | None = None, **kwargs: Any) -> None:
        if message is None:
            message = "Connectivity log not found"
        details = kwargs.pop("details", {}) or {}
        details["sample_id"] = sample_id
        super().__init__(message, details=details, **kwargs)


class PlaceNotFoundError(NotFoundError):
    default_message = "No place found"
    default_error_code = "PLACE_NOT_FOUND"


# Conflict Errors
class ConflictError(SignalWatchError):
    default_message = "Request conflicts with current state"
    default_error_code = "CONFLICT"
    default_status_code = 409


class InvalidStateTransition(ConflictError):
    """Raised when a state machine transition is not allowed from the current state."""

    default_message = "Invalid state transition"
    default_error_code = "INVALID_STATE_TRANSITION"

    def __init__(
        self,
        message: str | None = None,
        *,
        from_status: str | None = None,
        to_status: str | None = None,
        **kwargs: Any,
    ) -> None:
        if message is None and from_status and to_status:
            message = f"Cannot transition from '{from_status}' to '{to_status}'"
        self.from_status = from_status
        self.to_status = to_status
        details = kwargs.pop("details", {}) or {}
        if from_status is not None:
            details["from_status"] = from_status
        if to_status is not None:
            details["to_status"] = to_status
        super().__init__(message, details=details, **kwargs)


class AlertAlreadyHandledError(InvalidStateTransition):
    """Raised when confirming or dismissing an alert that is no longer pending."""

    default_message = "Alert already handled"
    default_error_code = "ALERT_ALREADY_HANDLED"
    default_status_code = 400

    def __init__(self, alert_id: str, **kwargs: Any) -> None:
        details = kwargs.pop("details", {}) or {}
        details["alert_id"] = alert_id
        super().__init__(self.default_message, details=details, **kwargs)


# External Service Errors (503)
class ExternalServiceError(SignalWatchError):
    default_message = "External service temporarily unavailable"
    default_error_code = "SERVICE_UNAVAILABLE"
    default_status_code = 503

    def __init__(
        self,
        message: str | None = None,
        *,
        service_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.service_name = service_name
        details = kwargs.pop("details", {}) or {}
        if service_name:
            details["service"] = service_name
        super().__init__(message, details=details, **kwargs)


class NotificationDeliveryError(ExternalServiceError):
    default_message = "Email delivery failed"
    default_error_code = "NOTIFICATION_DELIVERY_FAILED"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, service_name="notification", **kwargs)


class PlaceLookupError(ExternalServiceError):
    default_message = "Place lookup failed"
    default_error_code = "PLACE_LOOKUP_FAILED"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, service_name="places", **kwargs)


def get_exception_status_code(exc: Exception) -> int:
    if isinstance(exc, SignalWatchError):
        return exc.status_code
    return 500


def get_exception_error_code(exc: Exception) -> str:
    if isinstance(exc, SignalWatchError):
        return exc.error_code
    return "INTERNAL_ERROR"
