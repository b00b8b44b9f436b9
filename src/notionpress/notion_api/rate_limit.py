"""Client-side request pacing.

Notion allows an average of three requests per second per integration.
:class:`TokenBucket` (threads) and :class:`AsyncTokenBucket` (coroutines)
hand out one token per request; tokens refill at ``rate_rps`` up to
``burst``.  A caller that finds the bucket empty waits for the deficit to
refill.
"""

from __future__ import annotations

import asyncio
import threading
import time


class _Bucket:
    """Refill bookkeeping shared by both bucket flavours."""

    __slots__ = ("burst", "last_refill", "rate", "tokens")

    def __init__(self, rate_rps: float, burst: int) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")
        self.rate: float = rate_rps
        self.burst: int = burst
        self.tokens: float = float(burst)
        self.last_refill: float = time.monotonic()

    def reserve(self, tokens: int) -> float:
        """Take *tokens* and return how long the caller must wait for them."""
        now = time.monotonic()
        self.tokens = min(self.burst, self.tokens + (now - self.last_refill) * self.rate)
        self.last_refill = now

        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0

        wait = (tokens - self.tokens) / self.rate
        self.tokens = 0.0
        return wait


class TokenBucket(_Bucket):
    """Thread-safe token bucket.

    Parameters
    ----------
    rate_rps:
        Refill rate in tokens per second.
    burst:
        Bucket capacity.
    """

    __slots__ = ("_lock",)

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        super().__init__(rate_rps, burst)
        self._lock = threading.Lock()

    def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, sleeping if needed; return the seconds waited."""
        with self._lock:
            wait = self.reserve(tokens)
        if wait > 0:
            time.sleep(wait)
        return wait


class AsyncTokenBucket(_Bucket):
    """Coroutine-safe token bucket; see :class:`TokenBucket`."""

    __slots__ = ("_lock",)

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        super().__init__(rate_rps, burst)
        self._lock = asyncio.Lock()

    async def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, awaiting if needed; return the seconds waited."""
        async with self._lock:
            wait = self.reserve(tokens)
        if wait > 0:
            await asyncio.sleep(wait)
        return wait
