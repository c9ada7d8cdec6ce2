"""notiondb -- Notion database API client with rate-limit aware retries.

Public re-exports
-----------------

* **Clients:** :class:`NotionClient`, :class:`AsyncNotionClient`
* **Configuration:** :class:`NotionConfig`, :class:`RetryConfig`
* **Requests:** :class:`RequestBuilder`, :class:`Request`
* **Errors:** :class:`NotionError`, its variants, and :class:`ErrorKind`
* **Models:** database, page and envelope dataclasses

Usage::

    from notiondb import NotionClient

    client = NotionClient(token="secret_xxx")
    databases = client.list_databases()
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from notiondb.async_client import AsyncNotionClient
from notiondb.client import NotionClient

# ── Configuration ───────────────────────────────────────────────────────
from notiondb.config import NotionConfig, RetryConfig

# ── Errors ──────────────────────────────────────────────────────────────
from notiondb.errors import (
    ErrorKind,
    NotionAPIError,
    NotionError,
    NotionInvalidRequestError,
    NotionRateLimitedError,
    NotionTransportError,
    NotionUnauthorizedError,
)

# ── Models ──────────────────────────────────────────────────────────────
from notiondb.models import (
    Database,
    DatabaseQuery,
    ErrorResponse,
    ListResponse,
    ObjectResponse,
    Page,
    RichText,
    Sort,
    SortDirection,
    User,
)

# ── Requests ────────────────────────────────────────────────────────────
from notiondb.request import Request, RequestBuilder

__all__ = [
    # Clients
    "NotionClient",
    "AsyncNotionClient",
    # Configuration
    "NotionConfig",
    "RetryConfig",
    # Requests
    "Request",
    "RequestBuilder",
    # Errors
    "ErrorKind",
    "NotionError",
    "NotionTransportError",
    "NotionRateLimitedError",
    "NotionUnauthorizedError",
    "NotionInvalidRequestError",
    "NotionAPIError",
    # Models
    "Database",
    "DatabaseQuery",
    "ErrorResponse",
    "ListResponse",
    "ObjectResponse",
    "Page",
    "RichText",
    "Sort",
    "SortDirection",
    "User",
]
