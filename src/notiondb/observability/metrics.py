"""Pluggable metrics for the notiondb transport.

Pass any object satisfying :class:`MetricsHook` as
``NotionConfig(metrics=...)`` to route data points to StatsD, Prometheus or
similar.  Without one, :class:`NoopMetricsHook` discards everything.

Emitted by the transport:

* ``notiondb.requests_total`` -- counter, tagged ``method``/``path``/``status``
* ``notiondb.request_duration_ms`` -- timing, same tags
* ``notiondb.rate_limited_total`` -- counter, one per 429 received
* ``notiondb.retries_total`` -- counter, one per backoff sleep
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Structural type for metrics backends.  Tags are ``str -> str``."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None: ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None: ...


class NoopMetricsHook:
    """Metrics backend that drops every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
