"""Tests for notiondb/request.py."""

from __future__ import annotations

import dataclasses

import pytest

from notiondb.errors import NotionInvalidRequestError
from notiondb.models import DatabaseQuery, Sort, SortDirection
from notiondb.request import Request, RequestBuilder, normalize_method, to_json_value

BASE = "https://api.notion.com/v1"


class TestRequestBuilder:
    def test_defaults(self):
        request = RequestBuilder("/databases").build()
        assert request.endpoint == "/databases"
        assert request.method == "GET"
        assert dict(request.query_params) == {}
        assert request.body is None
        assert request.has_body is False

    def test_query_param_and_json_body(self):
        request = (
            RequestBuilder("/databases")
            .query_param("page_size", "100")
            .json_body({"filter": {"property": "Status", "select": {"equals": "Done"}}})
            .build()
        )
        assert request.build_url(BASE) == f"{BASE}/databases?page_size=100"
        assert request.has_body

    def test_values_are_stringified(self):
        request = RequestBuilder("/x").query_param("page_size", 10).build()
        assert request.query_params["page_size"] == "10"

    def test_repeated_key_replaces_value(self):
        request = RequestBuilder("/x").query_param("a", "1").query_param("a", "2").build()
        assert dict(request.query_params) == {"a": "2"}

    def test_query_params_from_mapping_and_pairs(self):
        request = (
            RequestBuilder("/x")
            .query_params({"b": 2})
            .query_params([("a", 1)])
            .build()
        )
        assert dict(request.query_params) == {"b": "2", "a": "1"}

    def test_method_is_normalised(self):
        assert RequestBuilder("/x").method("post").json_body({}).build().method == "POST"

    def test_unknown_method_rejected(self):
        with pytest.raises(NotionInvalidRequestError):
            RequestBuilder("/x").method("PUT")

    def test_body_serialises_dto(self):
        query = DatabaseQuery(sorts=[Sort("Due", SortDirection.DESCENDING)], page_size=5)
        request = RequestBuilder("/q").method("POST").body(query).build()
        assert request.body == {
            "sorts": [{"property": "Due", "direction": "descending"}],
            "page_size": 5,
        }

    def test_builder_reuse_does_not_change_built_request(self):
        builder = RequestBuilder("/x").query_param("a", "1")
        first = builder.build()
        builder.query_param("b", "2")
        assert dict(first.query_params) == {"a": "1"}


class TestRequest:
    def test_is_immutable(self):
        request = RequestBuilder("/x").build()
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.endpoint = "/y"  # type: ignore[misc]

    def test_query_params_are_read_only(self):
        request = RequestBuilder("/x").query_param("a", "1").build()
        with pytest.raises(TypeError):
            request.query_params["b"] = "2"  # type: ignore[index]

    def test_url_without_params_has_no_question_mark(self):
        assert Request("/databases/abc").build_url(BASE) == f"{BASE}/databases/abc"

    def test_url_params_keep_insertion_order(self):
        request = Request("/x", query_params={"z": "1", "a": "2", "m": "3"})
        assert request.build_url(BASE) == f"{BASE}/x?z=1&a=2&m=3"

    def test_url_params_are_encoded(self):
        request = Request("/x", query_params={"start_cursor": "a b&c"})
        assert request.build_url(BASE) == f"{BASE}/x?start_cursor=a+b%26c"

    def test_direct_construction_validates_method(self):
        with pytest.raises(NotionInvalidRequestError):
            Request("/x", method="TRACE")


class TestHelpers:
    @pytest.mark.parametrize("method", ["get", "Post", "PATCH", "delete"])
    def test_normalize_method(self, method):
        assert normalize_method(method) == method.upper()

    def test_to_json_value_handles_nested_structures(self):
        value = {"sorts": (Sort("A"),), "direction": SortDirection.ASCENDING, "n": 1}
        assert to_json_value(value) == {
            "sorts": [{"property": "A", "direction": "ascending"}],
            "direction": "ascending",
            "n": 1,
        }

    def test_to_json_value_plain_dataclass(self):
        @dataclasses.dataclass
        class Point:
            x: int
            kind: SortDirection

        assert to_json_value(Point(1, SortDirection.DESCENDING)) == {
            "x": 1, "kind": "descending",
        }
