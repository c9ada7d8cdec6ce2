"""Sync and async HTTP transports for the Notion API.

Both transports run the same request lifecycle for every HTTP verb:

1. Reject POST / PATCH requests without a body before touching the network.
2. Resolve the full URL and send it with the auth and version headers.
3. On ``2xx`` -- decode the JSON body with the caller's decoder.
4. On ``429`` -- sleep (``Retry-After`` or exponential backoff) and resend,
   up to ``RetryConfig.max_retries`` times, then raise
   :class:`NotionRateLimitedError`.
5. On ``401`` -- raise :class:`NotionUnauthorizedError` without retrying.
6. On any other status -- raise :class:`NotionAPIError` from the error
   envelope.

Transport failures (connection errors, timeouts, undecodable bodies) raise
:class:`NotionTransportError` and are never retried here.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json as _json
import sys
import time
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any, NoReturn, TypeVar

import httpx

from notiondb.config import NotionConfig
from notiondb.errors import (
    DEFAULT_RETRY_AFTER_SECONDS,
    NotionAPIError,
    NotionInvalidRequestError,
    NotionRateLimitedError,
    NotionTransportError,
    NotionUnauthorizedError,
)
from notiondb.models import ErrorResponse, ListResponse
from notiondb.observability import NoopMetricsHook, get_logger
from notiondb.request import BODY_REQUIRED_METHODS, Request, normalize_method

from .retries import backoff_for, parse_retry_after

T = TypeVar("T")

log = get_logger("notiondb.transport")

DEFAULT_PAGE_SIZE = 100


# ---------------------------------------------------------------------------
# Helpers shared by both transports
# ---------------------------------------------------------------------------

def _prepare(method: str, request: Request) -> tuple[str, dict[str, Any]]:
    """Validate *method* against *request* and return the httpx kwargs."""
    method = normalize_method(method)
    if method in BODY_REQUIRED_METHODS:
        if not request.has_body:
            raise NotionInvalidRequestError(
                f"Request body is required for {method} requests",
                context={"method": method, "path": request.endpoint},
            )
        return method, {"json": request.body}
    return method, {}


def _decode_success(
    response: httpx.Response,
    decode: Callable[[Any], T] | None,
    ctx: dict[str, Any],
) -> T | Any:
    try:
        data = response.json()
        return decode(data) if decode is not None else data
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise NotionTransportError(exc, context=ctx) from exc


def _raise_for_status(response: httpx.Response, ctx: dict[str, Any]) -> NoReturn:
    """Raise the typed error for a non-2xx, non-429 response."""
    status = response.status_code
    ctx = {**ctx, "status_code": status}
    if status == 401:
        raise NotionUnauthorizedError(context=ctx)
    try:
        body = response.json()
    except ValueError as exc:
        raise NotionTransportError(exc, context=ctx) from exc
    envelope = ErrorResponse.parse(body)
    raise NotionAPIError(
        code=envelope.code,
        message=envelope.message,
        status_code=status,
        context=ctx,
    )


def _rate_limit_delay(
    config: NotionConfig,
    metrics: Any,
    response: httpx.Response,
    attempt: int,
    ctx: dict[str, Any],
) -> float:
    """Return the sleep before the next attempt, or raise once retries are spent."""
    retry_after = parse_retry_after(response)
    metrics.increment("notiondb.rate_limited_total", tags=_tags(ctx))

    if attempt >= config.retry.max_retries:
        log.warning(
            "Rate limit retries exhausted",
            extra={"extra_fields": {**ctx, "attempt": attempt, "retry_after": retry_after}},
        )
        raise NotionRateLimitedError(
            retry_after=retry_after if retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS,
            context={**ctx, "attempts": attempt + 1},
        )

    delay = backoff_for(config.retry, attempt, retry_after)
    log.warning(
        "Rate limited by Notion API",
        extra={
            "extra_fields": {
                **ctx,
                "status_code": 429,
                "retry_after": retry_after,
                "attempt": attempt,
                "delay_seconds": delay,
            }
        },
    )
    metrics.increment("notiondb.retries_total", tags=_tags(ctx))
    return delay


def _tags(ctx: dict[str, Any]) -> dict[str, str]:
    return {"method": ctx["method"], "path": ctx["path"]}


def _record(metrics: Any, ctx: dict[str, Any], status: int, elapsed_ms: float) -> None:
    tags = {**_tags(ctx), "status": str(status)}
    metrics.increment("notiondb.requests_total", tags=tags)
    metrics.timing("notiondb.request_duration_ms", elapsed_ms, tags=tags)


def _emit_debug_dump(
    config: NotionConfig,
    method: str,
    response: httpx.Response,
    payload: Any,
) -> None:
    """Write a redacted request/response dump to stderr if enabled."""
    if not config.debug_dump_payload:
        return
    from notiondb.utils.redact import redact

    try:
        resp_body: Any = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    try:
        url: str | None = str(response.request.url)
    except RuntimeError:
        url = None
    dump: dict[str, Any] = {
        "method": method,
        "url": url,
        "headers": {"Authorization": f"Bearer {config.token}"},
        "response_status": response.status_code,
        "response_body": resp_body,
    }
    if payload is not None:
        dump["request_body"] = payload
    print(_json.dumps(redact(dump, config.token), indent=2, default=str), file=sys.stderr)


def _page_request(request: Request, cursor: str | None) -> Request:
    """Return *request* pointed at the page starting at *cursor*."""
    if request.method == "GET":
        params = dict(request.query_params)
        params.setdefault("page_size", str(DEFAULT_PAGE_SIZE))
        params.pop("start_cursor", None)
        if cursor is not None:
            params["start_cursor"] = cursor
        return dataclasses.replace(request, query_params=params)

    body = dict(request.body or {})
    body.setdefault("page_size", DEFAULT_PAGE_SIZE)
    body.pop("start_cursor", None)
    if cursor is not None:
        body["start_cursor"] = cursor
    return dataclasses.replace(request, body=body)


def _default_headers(config: NotionConfig) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {config.token}",
        "Notion-Version": config.notion_version,
        "Content-Type": "application/json",
    }


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class NotionTransport:
    """Synchronous HTTP transport with auth and rate-limit retries.

    Parameters
    ----------
    config:
        The :class:`NotionConfig` controlling headers, timeouts and retries.
    """

    def __init__(self, config: NotionConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(
            headers=_default_headers(config),
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    @property
    def config(self) -> NotionConfig:
        return self._config

    # -- public API --------------------------------------------------------

    def invoke(
        self,
        method: str,
        request: Request,
        decode: Callable[[Any], T] | None = None,
    ) -> T | Any:
        """Send *request* with *method* and return the decoded response.

        Parameters
        ----------
        method:
            ``GET``, ``POST``, ``PATCH`` or ``DELETE``.  Overrides
            ``request.method``.
        request:
            The :class:`Request` supplying path, query and body.
        decode:
            Applied to the parsed JSON body on success.  ``None`` returns the
            parsed JSON unchanged.

        Raises
        ------
        NotionInvalidRequestError
            POST / PATCH without a body; no request is sent.
        NotionTransportError
            Network failure or a body that cannot be decoded.
        NotionRateLimitedError
            Still rate limited after ``max_retries`` retries.
        NotionUnauthorizedError
            On 401 responses.
        NotionAPIError
            On every other non-2xx response.
        """
        method, send_kwargs = _prepare(method, request)
        url = request.build_url(self._config.base_url)
        ctx = {"method": method, "path": request.endpoint}

        attempt = 0
        while True:
            response = self._send(method, url, send_kwargs, ctx)

            if response.is_success:
                return _decode_success(response, decode, ctx)

            if response.status_code == 429:
                delay = _rate_limit_delay(self._config, self._metrics, response, attempt, ctx)
                time.sleep(delay)
                attempt += 1
                continue

            _raise_for_status(response, ctx)

    def send(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        """Invoke *request* with its own ``method``."""
        return self.invoke(request.method, request, decode)

    def get(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self.invoke("GET", request, decode)

    def post(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self.invoke("POST", request, decode)

    def patch(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self.invoke("PATCH", request, decode)

    def delete(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return self.invoke("DELETE", request, decode)

    def paginate(
        self,
        request: Request,
        decode_item: Callable[[Any], T] | None = None,
    ) -> Iterator[T]:
        """Yield every result across all pages of a list endpoint.

        GET requests carry ``start_cursor`` / ``page_size`` as query
        parameters, POST requests in the JSON body.  Iteration stops when
        ``has_more`` is false or no ``next_cursor`` is returned.
        """
        decode_page = ListResponse.decoder(decode_item or (lambda item: item))
        cursor: str | None = None
        while True:
            page = self.send(_page_request(request, cursor), decode_page)
            yield from page.results
            if not page.has_more or page.next_cursor is None:
                break
            cursor = page.next_cursor

    def close(self) -> None:
        """Close the underlying HTTP client and release pooled connections."""
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- internals ---------------------------------------------------------

    def _send(
        self,
        method: str,
        url: str,
        send_kwargs: dict[str, Any],
        ctx: dict[str, Any],
    ) -> httpx.Response:
        t0 = time.monotonic()
        try:
            response = self._client.request(method, url, **send_kwargs)
        except httpx.HTTPError as exc:
            log.warning(
                "Request transport error",
                extra={"extra_fields": {**ctx, "error": str(exc)}},
            )
            raise NotionTransportError(exc, context=ctx) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000
        log.debug(
            "Request completed",
            extra={"extra_fields": {**ctx, "status_code": response.status_code,
                                    "elapsed_ms": round(elapsed_ms, 1)}},
        )
        _record(self._metrics, ctx, response.status_code, elapsed_ms)
        _emit_debug_dump(self._config, method, response, send_kwargs.get("json"))
        return response


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth and rate-limit retries.

    Mirrors :class:`NotionTransport` on top of ``httpx.AsyncClient``; backoff
    sleeps use ``asyncio.sleep``.  Each call owns its own attempt counter,
    so concurrent calls on one transport do not interact.
    """

    def __init__(self, config: NotionConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(
            headers=_default_headers(config),
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    @property
    def config(self) -> NotionConfig:
        return self._config

    # -- public API --------------------------------------------------------

    async def invoke(
        self,
        method: str,
        request: Request,
        decode: Callable[[Any], T] | None = None,
    ) -> T | Any:
        """Async equivalent of :meth:`NotionTransport.invoke`."""
        method, send_kwargs = _prepare(method, request)
        url = request.build_url(self._config.base_url)
        ctx = {"method": method, "path": request.endpoint}

        attempt = 0
        while True:
            response = await self._send(method, url, send_kwargs, ctx)

            if response.is_success:
                return _decode_success(response, decode, ctx)

            if response.status_code == 429:
                delay = _rate_limit_delay(self._config, self._metrics, response, attempt, ctx)
                await asyncio.sleep(delay)
                attempt += 1
                continue

            _raise_for_status(response, ctx)

    async def send(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self.invoke(request.method, request, decode)

    async def get(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self.invoke("GET", request, decode)

    async def post(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self.invoke("POST", request, decode)

    async def patch(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self.invoke("PATCH", request, decode)

    async def delete(self, request: Request, decode: Callable[[Any], T] | None = None) -> T | Any:
        return await self.invoke("DELETE", request, decode)

    async def paginate(
        self,
        request: Request,
        decode_item: Callable[[Any], T] | None = None,
    ) -> AsyncIterator[T]:
        """Async equivalent of :meth:`NotionTransport.paginate`."""
        decode_page = ListResponse.decoder(decode_item or (lambda item: item))
        cursor: str | None = None
        while True:
            page = await self.send(_page_request(request, cursor), decode_page)
            for item in page.results:
                yield item
            if not page.has_more or page.next_cursor is None:
                break
            cursor = page.next_cursor

    async def close(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- internals ---------------------------------------------------------

    async def _send(
        self,
        method: str,
        url: str,
        send_kwargs: dict[str, Any],
        ctx: dict[str, Any],
    ) -> httpx.Response:
        t0 = time.monotonic()
        try:
            response = await self._client.request(method, url, **send_kwargs)
        except httpx.HTTPError as exc:
            log.warning(
                "Request transport error",
                extra={"extra_fields": {**ctx, "error": str(exc)}},
            )
            raise NotionTransportError(exc, context=ctx) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000
        log.debug(
            "Request completed",
            extra={"extra_fields": {**ctx, "status_code": response.status_code,
                                    "elapsed_ms": round(elapsed_ms, 1)}},
        )
        _record(self._metrics, ctx, response.status_code, elapsed_ms)
        _emit_debug_dump(self._config, method, response, send_kwargs.get("json"))
        return response
