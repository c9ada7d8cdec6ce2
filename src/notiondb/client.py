"""Synchronous Notion database client.

Usage::

    from notiondb import DatabaseQuery, NotionClient, RetryConfig

    with NotionClient(token="secret_xxx", retry=RetryConfig(max_retries=5)) as client:
        for db in client.list_databases().results:
            print(db.id, db.plain_title)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from notiondb.api.databases import DatabaseAPI
from notiondb.api.transport import NotionTransport
from notiondb.config import NotionConfig
from notiondb.models import Database, DatabaseQuery, ListResponse, ObjectResponse, Page
from notiondb.request import Request

T = TypeVar("T")


class NotionClient:
    """Synchronous Notion client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**
    config:
        A ready-made :class:`NotionConfig`, e.g. from
        :meth:`NotionConfig.from_env`.  When given, *token* and *kwargs*
        are ignored.
    **kwargs:
        Forwarded to :class:`NotionConfig` (``retry``, ``base_url``,
        ``timeout_seconds``...).
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        config: NotionConfig | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = NotionConfig(token=token or "", **kwargs)
        self._config = config
        self._transport = NotionTransport(config)
        self._databases = DatabaseAPI(self._transport)

    @property
    def config(self) -> NotionConfig:
        return self._config

    # ------------------------------------------------------------------
    # Generic verbs
    # ------------------------------------------------------------------

    def get(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self._transport.get(request, decode)

    def post(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self._transport.post(request, decode)

    def patch(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self._transport.patch(request, decode)

    def delete(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self._transport.delete(request, decode)

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------

    def list_databases(
        self,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> ListResponse[Database]:
        """List databases shared with the integration."""
        return self._databases.list(start_cursor, page_size)

    def get_database(self, database_id: str) -> ObjectResponse[Database]:
        return self._databases.retrieve(database_id)

    def create_database(
        self,
        parent_page_id: str,
        title: str,
        properties: dict[str, Any],
    ) -> ObjectResponse[Database]:
        return self._databases.create(parent_page_id, title, properties)

    def update_database(
        self,
        database_id: str,
        title: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> ObjectResponse[Database]:
        return self._databases.update(database_id, title, properties)

    def query_database(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> ListResponse[Page]:
        """Query a database with optional filter, sorts and pagination."""
        return self._databases.query(database_id, query)

    def iter_database_query(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> Iterator[Page]:
        """Yield every matching row, fetching further pages as needed."""
        return self._databases.iter_query(database_id, query)

    def create_database_page(
        self,
        database_id: str,
        title: str,
        title_property: str = "Name",
    ) -> ObjectResponse[Page]:
        """Add a row titled *title* to *database_id*."""
        return self._databases.create_page(database_id, title, title_property)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> NotionClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
