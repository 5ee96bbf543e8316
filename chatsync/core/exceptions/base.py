"""
Root of the chatsync error hierarchy.

Every error knows the HTTP status it should be answered with and a short
code for logs, so the API layer renders any ProjectError the same way:
``{"success": false, "error": <message>, "errorCode": <status>}``.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional, Type


class ProjectError(Exception):
    """
    Base class for errors raised by chatsync code.

    ``code`` and ``http_status`` fall back to the class defaults. ``details``
    carries ids and upstream payloads for the log line; it is never sent to
    the caller. ``cause`` keeps the lower-level exception that was translated.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.http_status = http_status or self.default_http_status
        self.details: dict[str, Any] = dict(details or {})
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r}, http_status={self.http_status})"

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Everything worth logging about the failure."""
        record: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "http_status": self.http_status,
        }
        if self.details:
            record["details"] = self.details
        if self.cause is not None:
            record["cause"] = repr(self.cause)
            record["cause_traceback"] = "".join(traceback.format_exception(
                type(self.cause), self.cause, self.cause.__traceback__,
            ))
        return record

    def to_response(self) -> dict[str, Any]:
        return {"success": False, "error": self.message, "errorCode": self.http_status}


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[ProjectError] = ProjectError,
) -> Type[ProjectError]:
    """
    Build a ProjectError subclass without writing a class body.

        UpstreamFetchError = exception_factory("UpstreamFetchError", http_status=500)
    """
    attrs = {
        "default_code": code or name.upper(),
        "default_http_status": http_status,
    }
    return type(name, (base,), attrs)
