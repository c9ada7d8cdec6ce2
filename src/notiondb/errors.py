"""Failure types raised by the notiondb client.

Every failure the client can surface is one :class:`NotionError` subclass,
and exactly one subclass exists per failure kind.  The kind is also exposed
as a machine-readable :class:`ErrorKind` tag so callers can dispatch with
either ``isinstance`` or ``err.kind == ErrorKind.RATE_LIMITED``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

DEFAULT_RETRY_AFTER_SECONDS = 60
"""Retry hint reported when a 429 response carried no ``Retry-After``."""


# ---------------------------------------------------------------------------
# Error kind enum
# ---------------------------------------------------------------------------

class ErrorKind(str, Enum):
    """Tag identifying which failure variant an error represents."""

    TRANSPORT = "TRANSPORT"
    RATE_LIMITED = "RATE_LIMITED"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_REQUEST = "INVALID_REQUEST"
    API_ERROR = "API_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionError(Exception):
    """Base exception for all notiondb failures.

    Parameters
    ----------
    kind:
        The :class:`ErrorKind` tag of the concrete subclass.
    message:
        Human-readable description, also used as ``str(err)``.
    context:
        Structured diagnostic data (``method``, ``path``, ``status_code``,
        ``attempt``...).  Never contains the integration token.
    cause:
        The underlying exception, if this error wraps another.
    """

    kind: ErrorKind

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.kind = kind
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class NotionTransportError(NotionError):
    """The request could not be completed or its body could not be decoded.

    Covers connection failures, timeouts, invalid JSON, and 2xx bodies that
    do not match the expected shape.  Never retried.
    """

    def __init__(
        self,
        cause: Exception,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=ErrorKind.TRANSPORT,
            message=f"HTTP request failed: {cause}",
            context=context,
            cause=cause,
        )


class NotionRateLimitedError(NotionError):
    """Notion kept answering 429 after every configured retry was used.

    ``retry_after`` is the last server hint in seconds, or
    :data:`DEFAULT_RETRY_AFTER_SECONDS` when none was sent.
    """

    def __init__(
        self,
        retry_after: int = DEFAULT_RETRY_AFTER_SECONDS,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.retry_after: int = retry_after
        super().__init__(
            kind=ErrorKind.RATE_LIMITED,
            message=f"Rate limit exceeded. Retry after {retry_after} seconds",
            context=context,
        )


class NotionUnauthorizedError(NotionError):
    """Notion returned 401: the integration token is invalid or revoked."""

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            kind=ErrorKind.UNAUTHORIZED,
            message="Authentication failed",
            context=context,
        )


class NotionInvalidRequestError(NotionError):
    """The caller built a request that cannot be sent.

    Raised before any network I/O, e.g. a POST without a body.
    """

    def __init__(self, reason: str, context: dict[str, Any] | None = None) -> None:
        self.reason: str = reason
        super().__init__(
            kind=ErrorKind.INVALID_REQUEST,
            message=f"Invalid request: {reason}",
            context=context,
        )


class NotionAPIError(NotionError):
    """Notion answered with an error envelope.

    ``code`` and ``api_message`` are taken verbatim from the response body
    (``"unknown"`` / ``"Unknown error"`` when missing).
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.code: str = code
        self.api_message: str = message
        self.status_code: int | None = status_code
        super().__init__(
            kind=ErrorKind.API_ERROR,
            message=f"Notion API error {code}: {message}",
            context=context,
        )
