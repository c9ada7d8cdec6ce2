"""Database endpoints of the Notion API.

The module-level ``*_request`` functions build the :class:`Request` for
each operation; :class:`DatabaseAPI` (sync) and :class:`AsyncDatabaseAPI`
(async) send them through a transport and decode the typed envelopes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from typing import Any

from notiondb.models import Database, DatabaseQuery, ListResponse, ObjectResponse, Page
from notiondb.request import Request, RequestBuilder

from .transport import AsyncNotionTransport, NotionTransport

_decode_database_list = ListResponse.decoder(Database.from_dict)
_decode_database = ObjectResponse.decoder(Database.from_dict)
_decode_page = ObjectResponse.decoder(Page.from_dict)
_decode_page_list = ListResponse.decoder(Page.from_dict)


def _text(content: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": content}}]


# ---------------------------------------------------------------------------
# Request builders
# ---------------------------------------------------------------------------

def list_request(start_cursor: str | None = None, page_size: int | None = None) -> Request:
    builder = RequestBuilder("/databases")
    if start_cursor is not None:
        builder.query_param("start_cursor", start_cursor)
    if page_size is not None:
        builder.query_param("page_size", page_size)
    return builder.build()


def get_request(database_id: str) -> Request:
    return RequestBuilder(f"/databases/{database_id}").build()


def create_request(parent_page_id: str, title: str, properties: dict[str, Any]) -> Request:
    """Build ``POST /databases`` creating a database under a page."""
    return (
        RequestBuilder("/databases")
        .method("POST")
        .json_body({
            "parent": {"type": "page_id", "page_id": parent_page_id},
            "title": _text(title),
            "properties": properties,
        })
        .build()
    )


def update_request(
    database_id: str,
    title: str | None = None,
    properties: dict[str, Any] | None = None,
) -> Request:
    """Build ``PATCH /databases/{id}``; only the supplied fields are sent.

    The body is always present (possibly ``{}``) so PATCH validation passes.
    """
    body: dict[str, Any] = {}
    if title is not None:
        body["title"] = _text(title)
    if properties is not None:
        body["properties"] = properties
    return RequestBuilder(f"/databases/{database_id}").method("PATCH").json_body(body).build()


def query_request(database_id: str, query: DatabaseQuery | None = None) -> Request:
    return (
        RequestBuilder(f"/databases/{database_id}/query")
        .method("POST")
        .body(query if query is not None else DatabaseQuery())
        .build()
    )


def create_page_request(database_id: str, title: str, title_property: str = "Name") -> Request:
    """Build ``POST /pages`` adding a row to a database.

    *title_property* is the name of the database's title column.
    """
    return (
        RequestBuilder("/pages")
        .method("POST")
        .json_body({
            "parent": {"type": "database_id", "database_id": database_id},
            "properties": {title_property: {"title": _text(title)}},
        })
        .build()
    )


# ---------------------------------------------------------------------------
# Sync API
# ---------------------------------------------------------------------------

class DatabaseAPI:
    """Synchronous wrapper for the database endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def list(
        self,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> ListResponse[Database]:
        """List databases shared with the integration (one page)."""
        return self._transport.get(list_request(start_cursor, page_size), _decode_database_list)

    def retrieve(self, database_id: str) -> ObjectResponse[Database]:
        return self._transport.get(get_request(database_id), _decode_database)

    def create(
        self,
        parent_page_id: str,
        title: str,
        properties: dict[str, Any],
    ) -> ObjectResponse[Database]:
        """Create a database under *parent_page_id*.

        *properties* is the Notion property schema, e.g.
        ``{"Name": {"title": {}}}``.
        """
        return self._transport.post(
            create_request(parent_page_id, title, properties), _decode_database,
        )

    def update(
        self,
        database_id: str,
        title: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> ObjectResponse[Database]:
        return self._transport.patch(
            update_request(database_id, title, properties), _decode_database,
        )

    def query(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> ListResponse[Page]:
        """Run one page of a database query.

        Follow ``next_cursor`` via ``DatabaseQuery.start_cursor`` or use
        :meth:`iter_query`.
        """
        return self._transport.post(query_request(database_id, query), _decode_page_list)

    def iter_query(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> Iterator[Page]:
        """Yield every row matching *query*, following cursors."""
        return self._transport.paginate(query_request(database_id, query), Page.from_dict)

    def create_page(
        self,
        database_id: str,
        title: str,
        title_property: str = "Name",
    ) -> ObjectResponse[Page]:
        return self._transport.post(
            create_page_request(database_id, title, title_property), _decode_page,
        )


# ---------------------------------------------------------------------------
# Async API
# ---------------------------------------------------------------------------

class AsyncDatabaseAPI:
    """Asynchronous wrapper for the database endpoints.

    Mirrors :class:`DatabaseAPI`; all methods except :meth:`iter_query` are
    coroutines.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def list(
        self,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> ListResponse[Database]:
        return await self._transport.get(
            list_request(start_cursor, page_size), _decode_database_list,
        )

    async def retrieve(self, database_id: str) -> ObjectResponse[Database]:
        return await self._transport.get(get_request(database_id), _decode_database)

    async def create(
        self,
        parent_page_id: str,
        title: str,
        properties: dict[str, Any],
    ) -> ObjectResponse[Database]:
        return await self._transport.post(
            create_request(parent_page_id, title, properties), _decode_database,
        )

    async def update(
        self,
        database_id: str,
        title: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> ObjectResponse[Database]:
        return await self._transport.patch(
            update_request(database_id, title, properties), _decode_database,
        )

    async def query(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> ListResponse[Page]:
        return await self._transport.post(
            query_request(database_id, query), _decode_page_list,
        )

    def iter_query(
        self,
        database_id: str,
        query: DatabaseQuery | None = None,
    ) -> AsyncIterator[Page]:
        return self._transport.paginate(query_request(database_id, query), Page.from_dict)

    async def create_page(
        self,
        database_id: str,
        title: str,
        title_property: str = "Name",
    ) -> ObjectResponse[Page]:
        return await self._transport.post(
            create_page_request(database_id, title, title_property), _decode_page,
        )
