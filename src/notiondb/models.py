"""Data models mirroring the Notion API schema.

Every type is a plain dataclass.  Types received from the API expose a
``from_dict`` classmethod that raises ``KeyError``, ``TypeError`` or
``ValueError`` when the payload does not match the expected shape; the
transport turns those into :class:`~notiondb.errors.NotionTransportError`.
Types sent to the API expose ``to_dict``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Decoder = Callable[[Any], T]

_UNKNOWN_CODE = "unknown"
_UNKNOWN_MESSAGE = "Unknown error"


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string or null")
    return value


# ---------------------------------------------------------------------------
# Resource objects
# ---------------------------------------------------------------------------

@dataclass
class RichText:
    """A rich-text run; only the plain text and link are kept."""

    plain_text: str
    href: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RichText:
        data = _require_dict(data, "rich text")
        return cls(plain_text=_require_str(data, "plain_text"), href=_optional_str(data, "href"))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"plain_text": self.plain_text}
        if self.href is not None:
            out["href"] = self.href
        return out


@dataclass
class Database:
    """A Notion database object."""

    id: str
    title: list[RichText]
    properties: dict[str, Any]
    url: str
    created_time: str
    last_edited_time: str

    @classmethod
    def from_dict(cls, data: Any) -> Database:
        data = _require_dict(data, "database")
        title = data["title"]
        if not isinstance(title, list):
            raise TypeError("field 'title' must be a list")
        return cls(
            id=_require_str(data, "id"),
            title=[RichText.from_dict(item) for item in title],
            properties=_require_dict(data["properties"], "properties"),
            url=_require_str(data, "url"),
            created_time=_require_str(data, "created_time"),
            last_edited_time=_require_str(data, "last_edited_time"),
        )

    @property
    def plain_title(self) -> str:
        return "".join(t.plain_text for t in self.title)


@dataclass
class Page:
    """A page (database row) as returned when one is created."""

    id: str
    created_time: str
    last_edited_time: str
    archived: bool = False
    properties: dict[str, Any] = field(default_factory=dict)
    url: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Page:
        data = _require_dict(data, "page")
        return cls(
            id=_require_str(data, "id"),
            created_time=_require_str(data, "created_time"),
            last_edited_time=_require_str(data, "last_edited_time"),
            archived=bool(data.get("archived", False)),
            properties=_require_dict(data.get("properties", {}), "properties"),
            url=_optional_str(data, "url"),
        )


@dataclass
class User:
    """A Notion user or bot.  Type-specific fields are kept as-is."""

    id: str
    object: str
    name: str | None = None
    avatar_url: str | None = None
    type_specific: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> User:
        data = _require_dict(data, "user")
        known = {"id", "object", "name", "avatar_url"}
        return cls(
            id=_require_str(data, "id"),
            object=_require_str(data, "object"),
            name=_optional_str(data, "name"),
            avatar_url=_optional_str(data, "avatar_url"),
            type_specific={k: v for k, v in data.items() if k not in known},
        )


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------

class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass
class Sort:
    property: str
    direction: SortDirection = SortDirection.ASCENDING

    def to_dict(self) -> dict[str, Any]:
        return {"property": self.property, "direction": SortDirection(self.direction).value}


@dataclass
class DatabaseQuery:
    """Body of ``POST /databases/{id}/query``.  Unset fields are omitted."""

    filter: dict[str, Any] | None = None
    sorts: list[Sort] | None = None
    start_cursor: str | None = None
    page_size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.filter is not None:
            out["filter"] = self.filter
        if self.sorts is not None:
            out["sorts"] = [s.to_dict() for s in self.sorts]
        if self.start_cursor is not None:
            out["start_cursor"] = self.start_cursor
        if self.page_size is not None:
            out["page_size"] = self.page_size
        return out


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

@dataclass
class ListResponse(Generic[T]):
    """Paginated list envelope: ``results`` plus cursor information."""

    results: list[T]
    has_more: bool
    next_cursor: str | None = None

    @classmethod
    def decoder(cls, item: Decoder[T]) -> Decoder[ListResponse[T]]:
        """Return a function decoding a list envelope whose items use *item*."""

        def decode(data: Any) -> ListResponse[T]:
            data = _require_dict(data, "list response")
            results = data["results"]
            if not isinstance(results, list):
                raise TypeError("field 'results' must be a list")
            has_more = data["has_more"]
            if not isinstance(has_more, bool):
                raise TypeError("field 'has_more' must be a boolean")
            return cls(
                results=[item(r) for r in results],
                has_more=has_more,
                next_cursor=_optional_str(data, "next_cursor"),
            )

        return decode


@dataclass
class ObjectResponse(Generic[T]):
    """Single-object envelope: the ``object`` tag plus the decoded fields."""

    object: str
    data: T

    @classmethod
    def decoder(cls, item: Decoder[T]) -> Decoder[ObjectResponse[T]]:
        def decode(data: Any) -> ObjectResponse[T]:
            data = _require_dict(data, "object response")
            return cls(object=_require_str(data, "object"), data=item(data))

        return decode


@dataclass
class ErrorResponse:
    """Error envelope returned with non-2xx statuses."""

    code: str
    message: str
    status: int | None = None

    @classmethod
    def parse(cls, body: Any) -> ErrorResponse:
        """Lenient parse: missing or non-string fields fall back to defaults."""
        if not isinstance(body, dict):
            body = {}
        code = body.get("code")
        message = body.get("message")
        status = body.get("status")
        return cls(
            code=code if isinstance(code, str) else _UNKNOWN_CODE,
            message=message if isinstance(message, str) else _UNKNOWN_MESSAGE,
            status=status if isinstance(status, int) and not isinstance(status, bool) else None,
        )
