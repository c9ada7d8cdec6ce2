"""Backoff computation for rate-limited requests.

Only ``429`` responses are retried by the transport.  The helpers here are
pure so they can be tested without any HTTP machinery:

* :func:`parse_retry_after` -- read the server's ``Retry-After`` hint.
* :func:`compute_backoff` -- compute the delay before the next attempt.
"""

from __future__ import annotations

import httpx

from notiondb.config import RetryConfig

# Largest hint honoured; larger values cannot be passed to time.sleep on every
# platform and are treated like a malformed header.
MAX_RETRY_AFTER_SECONDS = 2**31 - 1


def parse_retry_after(response: httpx.Response) -> int | None:
    """Extract the ``Retry-After`` header as whole seconds, or ``None``.

    Values that are not non-negative ASCII integers (HTTP dates, fractions,
    Unicode digits, garbage) or that exceed :data:`MAX_RETRY_AFTER_SECONDS`
    are treated as absent.
    """
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    seconds = int(raw)
    if seconds > MAX_RETRY_AFTER_SECONDS:
        return None
    return seconds


def compute_backoff(
    attempt: int,
    base_delay_ms: int = 1000,
    max_delay_ms: int = 5000,
    retry_after: int | None = None,
) -> float:
    """Return the delay in seconds before retry number *attempt*.

    Parameters
    ----------
    attempt:
        Zero-based retry number; the initial send is not counted.
    base_delay_ms:
        Delay for ``attempt == 0``, doubled for every later attempt.
    max_delay_ms:
        Cap applied to the exponential delay.
    retry_after:
        Server hint in seconds.  When given it is used exactly and is
        **not** capped by *max_delay_ms*.
    """
    if retry_after is not None:
        return float(retry_after)
    delay_ms = min(base_delay_ms * (2 ** attempt), max_delay_ms)
    return delay_ms / 1000.0


def backoff_for(policy: RetryConfig, attempt: int, retry_after: int | None = None) -> float:
    """:func:`compute_backoff` with the knobs taken from *policy*."""
    return compute_backoff(
        attempt,
        base_delay_ms=policy.base_delay_ms,
        max_delay_ms=policy.max_delay_ms,
        retry_after=retry_after,
    )
