"""Tests for the retry policy and the token buckets."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from notionpress.notion_api.rate_limit import AsyncTokenBucket, TokenBucket
from notionpress.notion_api.retries import (
    RETRYABLE_STATUSES,
    compute_backoff,
    parse_retry_after,
    should_retry,
)


class TestShouldRetry:
    @pytest.mark.parametrize("status", sorted(RETRYABLE_STATUSES))
    def test_retryable_status(self, status):
        assert should_retry(status, None, attempt=0, max_attempts=3)

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409])
    def test_client_errors_are_final(self, status):
        assert not should_retry(status, None, attempt=0, max_attempts=3)

    def test_last_attempt_never_retried(self):
        assert not should_retry(503, None, attempt=2, max_attempts=3)

    def test_network_exceptions(self):
        assert should_retry(None, httpx.ConnectError("x"), 0, 3)
        assert should_retry(None, httpx.ReadTimeout("x"), 0, 3)
        assert not should_retry(None, ValueError("x"), 0, 3)


class TestParseRetryAfter:
    def _response(self, headers):
        return httpx.Response(429, headers=headers)

    def test_numeric(self):
        assert parse_retry_after(self._response({"Retry-After": "1.5"})) == 1.5

    def test_negative_clamped(self):
        assert parse_retry_after(self._response({"Retry-After": "-3"})) == 0.0

    def test_missing_or_date(self):
        assert parse_retry_after(self._response({})) is None
        assert parse_retry_after(
            self._response({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
        ) is None


class TestComputeBackoff:
    def test_exponential_and_capped(self):
        delays = [compute_backoff(a, base=1.0, maximum=5.0, jitter=False) for a in range(5)]
        assert delays == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_retry_after_wins(self):
        assert compute_backoff(0, base=1.0, jitter=False, retry_after=7.0) == 7.0

    def test_jitter_bounds(self):
        for attempt in range(4):
            nominal = min(2.0 ** attempt, 30.0)
            delay = compute_backoff(attempt)
            assert nominal * 0.5 <= delay <= nominal


class TestTokenBucket:
    def test_rejects_bad_parameters(self):
        with pytest.raises(ValueError):
            TokenBucket(rate_rps=0)
        with pytest.raises(ValueError):
            TokenBucket(rate_rps=1, burst=0)

    def test_burst_is_free(self):
        bucket = TokenBucket(rate_rps=1.0, burst=3)
        with patch("notionpress.notion_api.rate_limit.time.sleep") as sleep:
            waits = [bucket.acquire() for _ in range(3)]
        assert waits == [0.0, 0.0, 0.0]
        sleep.assert_not_called()

    def test_empty_bucket_waits_for_refill(self):
        bucket = TokenBucket(rate_rps=2.0, burst=1)
        with patch("notionpress.notion_api.rate_limit.time.monotonic", return_value=bucket.last_refill):
            bucket.acquire()
            with patch("notionpress.notion_api.rate_limit.time.sleep") as sleep:
                wait = bucket.acquire()
        assert wait == pytest.approx(0.5)
        sleep.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_bucket(self):
        bucket = AsyncTokenBucket(rate_rps=1000.0, burst=2)
        assert await bucket.acquire() == 0.0
        assert await bucket.acquire() == 0.0
        assert await bucket.acquire() >= 0.0
