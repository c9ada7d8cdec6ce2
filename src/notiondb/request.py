"""Request descriptors for the Notion API.

A :class:`RequestBuilder` collects the endpoint, HTTP method, query
parameters, and JSON body through chained calls and produces an immutable
:class:`Request`::

    request = (
        RequestBuilder("/databases")
        .query_param("page_size", 100)
        .build()
    )
    request.build_url("https://api.notion.com/v1")
    # 'https://api.notion.com/v1/databases?page_size=100'

Query parameters keep insertion order so that built URLs are
deterministic.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any
from urllib.parse import urlencode

from notiondb.errors import NotionInvalidRequestError

SUPPORTED_METHODS: frozenset[str] = frozenset({"GET", "POST", "PATCH", "DELETE"})

# Methods that cannot be sent without a JSON body.
BODY_REQUIRED_METHODS: frozenset[str] = frozenset({"POST", "PATCH"})


def normalize_method(method: str) -> str:
    """Upper-case *method* and reject anything outside :data:`SUPPORTED_METHODS`."""
    upper = method.upper()
    if upper not in SUPPORTED_METHODS:
        raise NotionInvalidRequestError(
            f"Unsupported HTTP method {method!r}",
            context={"method": method},
        )
    return upper


def to_json_value(value: Any) -> Any:
    """Convert *value* into something ``json.dumps`` accepts.

    Objects with a ``to_dict()`` method are asked to serialise themselves,
    dataclasses are converted field by field, and enums collapse to their
    value.  Containers are walked recursively.
    """
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {k: to_json_value(v) for k, v in dataclasses.asdict(value).items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return value


@dataclass(frozen=True)
class Request:
    """An immutable, ready-to-send request description."""

    endpoint: str
    method: str = "GET"
    query_params: Mapping[str, str] = field(default_factory=dict)
    body: Any | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", normalize_method(self.method))
        object.__setattr__(
            self, "query_params", MappingProxyType(dict(self.query_params)),
        )

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def build_url(self, base_url: str) -> str:
        """Return ``base_url + endpoint`` plus an encoded query string, if any."""
        url = f"{base_url}{self.endpoint}"
        if self.query_params:
            url = f"{url}?{urlencode(list(self.query_params.items()))}"
        return url


class RequestBuilder:
    """Chained builder for :class:`Request`.

    Parameters
    ----------
    endpoint:
        Path relative to the API root, e.g. ``/databases/<id>/query``.
    """

    def __init__(self, endpoint: str) -> None:
        self._endpoint = endpoint
        self._method = "GET"
        self._query_params: dict[str, str] = {}
        self._body: Any | None = None

    def method(self, method: str) -> RequestBuilder:
        self._method = normalize_method(method)
        return self

    def query_param(self, key: Any, value: Any) -> RequestBuilder:
        """Set one query parameter; a repeated key replaces the earlier value."""
        self._query_params[str(key)] = str(value)
        return self

    def query_params(
        self, params: Mapping[Any, Any] | Iterable[tuple[Any, Any]],
    ) -> RequestBuilder:
        items = params.items() if isinstance(params, Mapping) else params
        for key, value in items:
            self.query_param(key, value)
        return self

    def json_body(self, body: Any) -> RequestBuilder:
        """Use *body* verbatim as the JSON payload."""
        self._body = body
        return self

    def body(self, obj: Any) -> RequestBuilder:
        """Serialise *obj* (DTO, dataclass, or plain JSON value) as the payload."""
        self._body = to_json_value(obj)
        return self

    def build(self) -> Request:
        return Request(
            endpoint=self._endpoint,
            method=self._method,
            query_params=dict(self._query_params),
            body=self._body,
        )
