"""Property-based tests for notiondb using Hypothesis.

These check invariants of the pure building blocks (backoff, URL
construction, redaction, envelope decoding) over a wide range of inputs.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlsplit

from hypothesis import given
from hypothesis import strategies as st

from notiondb.api.retries import compute_backoff
from notiondb.models import ErrorResponse, ListResponse
from notiondb.request import Request, RequestBuilder
from notiondb.utils.redact import redact

BASE = "https://api.notion.com/v1"

_delay_ms = st.integers(min_value=0, max_value=60_000)
_attempt = st.integers(min_value=0, max_value=30)
_param_key = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=12)
_params = st.dictionaries(_param_key, st.text(max_size=20), max_size=6)


# ---------------------------------------------------------------------------
# Backoff
# ---------------------------------------------------------------------------

@given(attempt=_attempt, base=_delay_ms, cap=_delay_ms)
def test_backoff_never_exceeds_cap(attempt, base, cap):
    assert compute_backoff(attempt, base, cap) <= cap / 1000.0


@given(attempt=_attempt, base=_delay_ms, cap=_delay_ms)
def test_backoff_is_monotonic(attempt, base, cap):
    assert compute_backoff(attempt, base, cap) <= compute_backoff(attempt + 1, base, cap)


@given(attempt=_attempt, base=_delay_ms, cap=_delay_ms,
       retry_after=st.integers(min_value=0, max_value=3600))
def test_retry_after_is_used_exactly(attempt, base, cap, retry_after):
    assert compute_backoff(attempt, base, cap, retry_after=retry_after) == retry_after


# ---------------------------------------------------------------------------
# Request URLs
# ---------------------------------------------------------------------------

@given(params=_params)
def test_build_url_is_deterministic(params):
    request = Request("/databases", query_params=params)
    assert request.build_url(BASE) == request.build_url(BASE)


@given(params=_params)
def test_build_url_round_trips_params_in_order(params):
    url = RequestBuilder("/databases").query_params(params).build().build_url(BASE)
    parts = urlsplit(url)
    assert parts.path == "/v1/databases"
    assert parse_qsl(parts.query, keep_blank_values=True) == list(params.items())


@given(params=_params)
def test_question_mark_only_with_params(params):
    url = Request("/x", query_params=params).build_url(BASE)
    assert ("?" in url) == bool(params)


# ---------------------------------------------------------------------------
# Redaction
# ---------------------------------------------------------------------------

@given(token=st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_", min_size=8, max_size=40),
       prefix=st.text(alphabet=" :=-", max_size=5))
def test_token_never_survives_redaction(token, prefix):
    payload = {"body": {"message": f"{prefix}{token}"}, "list": [token]}
    assert token not in str(redact(payload, token=token))


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

@given(items=st.lists(st.integers()), has_more=st.booleans(),
       cursor=st.one_of(st.none(), st.text(max_size=10)))
def test_list_envelope_preserves_fields(items, has_more, cursor):
    decode = ListResponse.decoder(lambda item: item)
    result = decode({"results": items, "has_more": has_more, "next_cursor": cursor})
    assert (result.results, result.has_more, result.next_cursor) == (items, has_more, cursor)


@given(body=st.one_of(st.none(), st.integers(), st.text(),
                      st.dictionaries(st.text(max_size=5), st.integers(), max_size=3)))
def test_error_envelope_parse_never_raises(body):
    env = ErrorResponse.parse(body)
    assert isinstance(env.code, str)
    assert isinstance(env.message, str)
