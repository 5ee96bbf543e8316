"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from typing import Any, Optional

from chatsync.core.exceptions.base import ProjectError, exception_factory


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(ProjectError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class NotFoundError(ProjectError):
    """Requested resource not found."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class UnauthorizedError(ProjectError):
    """Authentication required or failed."""

    default_code = "UNAUTHORIZED"
    default_http_status = 401


class ExternalServiceError(ProjectError):
    """External service (booking provider, push gateway, DB) failed."""

    default_code = "EXTERNAL_SERVICE_ERROR"
    default_http_status = 502


class BookingProviderError(ExternalServiceError):
    """The booking provider rejected a request or answered ``success: false``.

    ``status`` is the HTTP status returned by the provider (None when no
    response was received), ``error_code`` the provider's own error code.
    """

    default_code = "BOOKING_PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        error_code: Optional[int] = None,
        payload: Any = None,
        **kwargs: Any,
    ) -> None:
        details = dict(kwargs.pop("details", None) or {})
        if status is not None:
            details["status"] = status
        if error_code is not None:
            details["error_code"] = error_code
        if payload is not None:
            details["payload"] = payload
        super().__init__(message, details=details, **kwargs)
        self.status = status
        self.error_code = error_code


# Request-path rendering of a failed record fetch (the on-demand sync answers 500).
UpstreamFetchError = exception_factory(
    "UpstreamFetchError", code="UPSTREAM_FETCH_ERROR", http_status=500,
)


class RateLimitError(ProjectError):
    """Caller exceeded a request rate limit."""

    default_code = "RATE_LIMITED"
    default_http_status = 429
