"""Sync and async HTTP transports for the Notion API.

One call to :meth:`NotionTransport.request` runs the whole request
lifecycle:

1. Wait for a token-bucket slot.
2. Send the request with the bearer token and ``Notion-Version`` header.
3. ``2xx`` -- return the decoded JSON body (``{}`` when empty).
4. ``429`` / ``5xx`` / timeout or connection failure -- back off and try
   again.  Other transport failures (protocol, proxy) are not retried.
5. Any other ``4xx`` -- raise the matching :class:`NotionpressAPIError`
   subclass at once, keeping Notion's error body in ``context["body"]``.
6. Attempts used up -- raise :class:`NotionpressRateLimitError` (``429``),
   :class:`NotionpressRetryExhaustedError` (``5xx``) or
   :class:`NotionpressNetworkError` (no response).  The last error body is
   kept so callers can still tell a structured rejection from a dead link.
7. A ``2xx`` body that is not JSON raises
   :class:`NotionpressConversionError`.
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
from typing import Any, NoReturn

import httpx

from notionpress.config import NotionpressConfig
from notionpress.errors import (
    NotionpressAPIError,
    NotionpressAuthError,
    NotionpressConversionError,
    NotionpressError,
    NotionpressNetworkError,
    NotionpressNotFoundError,
    NotionpressPermissionError,
    NotionpressRateLimitError,
    NotionpressRequestError,
    NotionpressRetryExhaustedError,
)
from notionpress.observability import get_logger, resolve_metrics
from notionpress.utils.redact import redact

from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RETRYABLE_STATUSES, compute_backoff, parse_retry_after, should_retry

log = get_logger("notionpress.transport")

_STATUS_ERRORS: dict[int, tuple[type[NotionpressAPIError], str]] = {
    401: (NotionpressAuthError, "Authentication failed"),
    403: (NotionpressPermissionError, "Permission denied"),
    404: (NotionpressNotFoundError, "Resource not found"),
}


def _decode_body(response: httpx.Response) -> Any:
    """Return the JSON body of *response*, or its text if it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text[:1000]


def _error_context(response: httpx.Response, method: str, path: str) -> dict[str, Any]:
    body = _decode_body(response)
    notion_code = body.get("code", "") if isinstance(body, dict) else ""
    return {
        "status_code": response.status_code,
        "notion_code": notion_code,
        "operation": f"{method} {path}",
        "body": body,
    }


def _error_detail(context: dict[str, Any]) -> str:
    body = context.get("body")
    if isinstance(body, dict):
        return str(body.get("message", ""))
    return str(body or "")


def _raise_for_status(response: httpx.Response, method: str, path: str) -> NoReturn:
    """Raise the typed error for a non-retryable ``4xx`` response."""
    context = _error_context(response, method, path)
    detail = _error_detail(context)
    error_cls, label = _STATUS_ERRORS.get(
        response.status_code, (NotionpressRequestError, f"Request rejected ({response.status_code})")
    )
    raise error_cls(message=f"{label} on {method} {path}: {detail}", context=context)


def _exhausted_error(
    method: str,
    path: str,
    attempts: int,
    response: httpx.Response,
) -> NotionpressError:
    """Build the error raised when a retryable status outlives every attempt."""
    context = _error_context(response, method, path)
    context["attempts"] = attempts
    context["last_status_code"] = response.status_code
    detail = _error_detail(context)
    if response.status_code == 429:
        context["retry_after_seconds"] = parse_retry_after(response)
        return NotionpressRateLimitError(
            message=f"Rate limited on {method} {path} after {attempts} attempts: {detail}",
            context=context,
        )
    return NotionpressRetryExhaustedError(
        message=(
            f"All {attempts} attempts exhausted for {method} {path} "
            f"(last status: {response.status_code})"
        ),
        context=context,
    )


def _dump_payload(
    config: NotionpressConfig,
    method: str,
    response: httpx.Response,
    payload: Any,
) -> None:
    """Write a redacted request/response dump to stderr when enabled."""
    if not config.debug_dump_payload:
        return
    dump: dict[str, Any] = {
        "method": method,
        "url": str(response.request.url),
        "request_body": payload,
        "response_status": response.status_code,
        "response_body": _decode_body(response),
    }
    print(
        "[notionpress] " + json.dumps(redact(dump, config.token), indent=2, default=str),
        file=sys.stderr,
    )


class _RequestPolicy:
    """Retry and metrics bookkeeping shared by both transports."""

    def __init__(self, config: NotionpressConfig) -> None:
        self.config = config
        self.metrics = resolve_metrics(config.metrics)

    def build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Notion-Version": self.config.notion_version,
            "Content-Type": "application/json",
        }

    def network_delay(self, method: str, path: str, exc: Exception, attempt: int) -> float:
        """Return the backoff after a network failure, or raise when spent."""
        self.metrics.increment(
            "notionpress.requests_total",
            tags={"method": method, "status": "error"},
        )
        log.warning(
            "request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not should_retry(None, exc, attempt, self.config.retry_max_attempts):
            raise NotionpressNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"url": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc
        return self._backoff(method, attempt, "network_error")

    def handle_response(
        self,
        method: str,
        path: str,
        response: httpx.Response,
        attempt: int,
        elapsed_ms: float,
        payload: Any,
    ) -> tuple[Any, float | None]:
        """Classify *response*.

        Returns ``(body, None)`` on success or ``(None, delay)`` when the
        request should be retried after *delay* seconds.  Raises on final
        failures.
        """
        status = response.status_code
        self.metrics.increment(
            "notionpress.requests_total",
            tags={"method": method, "status": str(status)},
        )
        self.metrics.timing(
            "notionpress.request_duration_ms",
            elapsed_ms,
            tags={"method": method, "status": str(status)},
        )
        _dump_payload(self.config, method, response, payload)

        if 200 <= status < 300:
            if status == 204 or not response.content:
                return {}, None
            try:
                return response.json(), None
            except ValueError as exc:
                raise NotionpressConversionError(
                    message=f"Non-JSON response on {method} {path} (status {status})",
                    context={
                        "status_code": status,
                        "operation": f"{method} {path}",
                        "body": response.text[:1000],
                    },
                    cause=exc,
                ) from exc

        if status not in RETRYABLE_STATUSES:
            _raise_for_status(response, method, path)

        max_attempts = self.config.retry_max_attempts
        if not should_retry(status, None, attempt, max_attempts):
            raise _exhausted_error(method, path, max_attempts, response)

        retry_after = None
        reason = "server_error"
        if status == 429:
            retry_after = parse_retry_after(response)
            reason = "rate_limited"

        log.warning(
            "retrying request",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "status_code": status,
                    "retry_after": retry_after,
                    "attempt": attempt + 1,
                }
            },
        )
        return None, self._backoff(method, attempt, reason, retry_after)

    def _backoff(
        self,
        method: str,
        attempt: int,
        reason: str,
        retry_after: float | None = None,
    ) -> float:
        self.metrics.increment(
            "notionpress.retries_total",
            tags={"method": method, "reason": reason},
        )
        return compute_backoff(
            attempt,
            base=self.config.retry_base_delay,
            maximum=self.config.retry_max_delay,
            jitter=self.config.retry_jitter,
            retry_after=retry_after,
        )


class NotionTransport:
    """Synchronous HTTP transport with auth, retries and pacing.

    Parameters
    ----------
    config:
        The :class:`NotionpressConfig` controlling every transport setting.
    client:
        An ``httpx.Client`` to use instead of building one (tests pass a
        client backed by :class:`httpx.MockTransport`).
    """

    def __init__(self, config: NotionpressConfig, client: httpx.Client | None = None) -> None:
        self._policy = _RequestPolicy(config)
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._client = client or httpx.Client(
            base_url=config.base_url,
            headers=self._policy.build_headers(),
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return its decoded JSON body.

        Parameters
        ----------
        method:
            HTTP method.
        path:
            Path relative to ``base_url``, e.g. ``/blocks/{id}/children``.
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``json=`` etc.).

        Raises
        ------
        NotionpressAuthError
            On ``401``.
        NotionpressPermissionError
            On ``403``.
        NotionpressNotFoundError
            On ``404``.
        NotionpressRequestError
            On ``400`` and other non-retryable ``4xx``.
        NotionpressRateLimitError
            On ``429`` after the last attempt.
        NotionpressRetryExhaustedError
            On ``5xx`` after the last attempt.
        NotionpressNetworkError
            When no response arrived on the last attempt, or at once for a
            transport failure that is not retried.
        NotionpressConversionError
            When a ``2xx`` body is not JSON.
        """
        payload = kwargs.get("json")
        for attempt in range(self._policy.config.retry_max_attempts):
            self._bucket.acquire()
            started = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                time.sleep(self._policy.network_delay(method, path, exc, attempt))
                continue

            elapsed_ms = (time.monotonic() - started) * 1000
            body, delay = self._policy.handle_response(
                method, path, response, attempt, elapsed_ms, payload
            )
            if delay is None:
                return body
            time.sleep(delay)

        # retry_max_attempts >= 1 and every path above returns, raises or
        # sleeps before the next attempt.
        raise AssertionError("unreachable")

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class AsyncNotionTransport:
    """Asynchronous twin of :class:`NotionTransport` over ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: NotionpressConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._policy = _RequestPolicy(config)
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            headers=self._policy.build_headers(),
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return its decoded JSON body (async).

        See :meth:`NotionTransport.request`.
        """
        payload = kwargs.get("json")
        for attempt in range(self._policy.config.retry_max_attempts):
            await self._bucket.acquire()
            started = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                await asyncio.sleep(self._policy.network_delay(method, path, exc, attempt))
                continue

            elapsed_ms = (time.monotonic() - started) * 1000
            body, delay = self._policy.handle_response(
                method, path, response, attempt, elapsed_ms, payload
            )
            if delay is None:
                return body
            await asyncio.sleep(delay)

        raise AssertionError("unreachable")

    async def close(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
