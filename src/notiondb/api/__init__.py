"""notiondb.api -- Notion API transport and endpoint wrappers.

* :mod:`.retries` -- ``Retry-After`` parsing and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth and rate-limit retries.
* :mod:`.databases` -- Database endpoint request builders and wrappers.
"""

from __future__ import annotations

from .databases import AsyncDatabaseAPI, DatabaseAPI
from .retries import compute_backoff, parse_retry_after
from .transport import AsyncNotionTransport, NotionTransport

__all__ = [
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
    "DatabaseAPI",
    "NotionTransport",
    "compute_backoff",
    "parse_retry_after",
]
