"""Credential redaction for debug dumps.

:func:`redact` is applied to every request/response dump the transport
writes when ``debug_dump_payload`` is enabled:

* Values under credential-like keys (``authorization``, ``token``,
  ``secret``...) are masked.
* The integration token is scrubbed from every string in the tree, showing
  at most its last four characters.
* Any remaining ``Bearer <value>`` pattern is masked.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")

# Substrings: a key containing any of these (case-insensitive) is redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
})


def _mask_token(value: str, token: str | None) -> str:
    if token and token in value:
        suffix = token[-4:] if len(token) > 4 else "****"
        value = value.replace(token, f"<redacted:...{suffix}>")
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, Mapping):
        return _redact_mapping(value, token)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        return _mask_token(value, token)
    return value


def _redact_mapping(d: Mapping, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = _mask_token(value, token) if isinstance(value, str) else "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: Mapping[str, Any], token: str | None = None) -> dict[str, Any]:
    """Return a redacted copy of *payload*; the input is never mutated.

    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _redact_mapping(payload, token)
