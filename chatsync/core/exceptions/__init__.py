"""Errors raised across chatsync; see base.ProjectError for the response contract."""
from chatsync.core.exceptions.base import ProjectError, exception_factory
from chatsync.core.exceptions.errors import (
    BookingProviderError,
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    UnauthorizedError,
    UpstreamFetchError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "exception_factory",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "RateLimitError",
    "UnauthorizedError",
    "ExternalServiceError",
    "BookingProviderError",
    "UpstreamFetchError",
]
