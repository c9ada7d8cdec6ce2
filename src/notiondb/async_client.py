"""Asynchronous Notion database client.

:class:`AsyncNotionClient` mirrors :class:`~notiondb.client.NotionClient`
but every I/O method is a coroutine.

Usage::

    import asyncio
    from notiondb import AsyncNotionClient

    async def main():
        async with AsyncNotionClient(token="secret_xxx") as client:
            db = await client.get_database("<database_id>")
            print(db.data.plain_title)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any, TypeVar

from notiondb.api.databases import AsyncDatabaseAPI
from notiondb.api.transport import AsyncNotionTransport
from notiondb.config import NotionConfig
from notiondb.models import Database, DatabaseQuery, ListResponse, ObjectResponse, Page
from notiondb.request import Request

T = TypeVar("T")


class AsyncNotionClient:
    """Asynchronous Notion client.

    Accepts the same arguments as :class:`~notiondb.client.NotionClient`.
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
        self._transport = AsyncNotionTransport(config)
        self._databases = AsyncDatabaseAPI(self._transport)

    @property
    def config(self) -> NotionConfig:
        return self._config

    # ------------------------------------------------------------------
    # Generic verbs
    # ------------------------------------------------------------------

    async def get(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self._transport.get(request, decode)

    async def post(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self._transport.post(request, decode)

    async def patch(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self._transport.patch(request, decode)

    async def delete(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self._transport.delete(request, decode)

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------

    async def list_databases(
        self,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> ListResponse[Database]:
        return await self._databases.list(start_cursor, page_size)

    async def get_database(self, database_id: str) -> ObjectResponse[Database]:
        return await self._databases.retrieve(database_id)

    async def create_database(
        self,
        parent_page_id: str,
        title: str,
        properties: dict[str, Any],
    ) -> ObjectResponse[Database]:
        return await self._databases.create(parent_page_id, title, properties)

    async def update_database(
        self,
        database_id: str,
        title: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> ObjectResponse[Database]:
        return await self._databases.update(database_id, title, properties)

    async def query_database(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> ListResponse[Page]:
        return await self._databases.query(database_id, query)

    def iter_database_query(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> AsyncIterator[Page]:
        """Async iterator over every matching row (use with ``async for``)."""
        return self._databases.iter_query(database_id, query)

    async def create_database_page(
        self,
        database_id: str,
        title: str,
        title_property: str = "Name",
    ) -> ObjectResponse[Page]:
        return await self._databases.create_page(database_id, title, title_property)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> AsyncNotionClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
