"""Client configuration for notiondb.

:class:`NotionConfig` is a frozen dataclass holding everything a client
needs for its whole lifetime: the integration token, API root and version,
and the :class:`RetryConfig` used when Notion answers 429.  Both
:class:`~notiondb.client.NotionClient` and
:class:`~notiondb.async_client.AsyncNotionClient` build one from their
keyword arguments.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

DEFAULT_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RetryConfig:
    """Backoff policy applied to rate-limited (429) responses.

    Parameters
    ----------
    max_retries:
        Number of retries after the initial send.  ``0`` disables retrying.
    base_delay_ms:
        Delay before the first retry; doubled for every subsequent one.
    max_delay_ms:
        Upper cap on the computed delay.  A server ``Retry-After`` hint is
        not subject to this cap.
    """

    max_retries: int = 3

    base_delay_ms: int = 1000

    max_delay_ms: int = 5000

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")
        if self.max_delay_ms < 0:
            raise ValueError(f"max_delay_ms must be >= 0, got {self.max_delay_ms}")


# ---------------------------------------------------------------------------
# Client configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NotionConfig:
    """Complete, immutable configuration for a notiondb client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    retry:
        The :class:`RetryConfig` used for 429 responses.
    timeout_seconds:
        HTTP request timeout in seconds, enforced by httpx.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notiondb.observability.MetricsHook` backend.
    debug_dump_payload:
        Write a redacted dump of every request/response to *stderr*.
    """

    token: str = ""

    notion_version: str = DEFAULT_NOTION_VERSION

    base_url: str = DEFAULT_BASE_URL

    retry: RetryConfig = field(default_factory=RetryConfig)

    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if isinstance(self.retry, dict):
            object.__setattr__(self, "retry", RetryConfig(**self.retry))

    @classmethod
    def from_env(cls, **overrides: Any) -> NotionConfig:
        """Build a config from ``NOTION_API_TOKEN`` and friends.

        ``NOTION_VERSION`` and ``NOTION_BASE_URL`` are honoured when set.
        Explicit *overrides* win over the environment.
        """
        values: dict[str, Any] = {"token": os.environ.get("NOTION_API_TOKEN", "")}
        if os.environ.get("NOTION_VERSION"):
            values["notion_version"] = os.environ["NOTION_VERSION"]
        if os.environ.get("NOTION_BASE_URL"):
            values["base_url"] = os.environ["NOTION_BASE_URL"]
        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionConfig({', '.join(parts)})"
