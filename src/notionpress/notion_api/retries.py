"""Retry policy for the Notion transport.

Two pure functions decide what happens after a failed attempt:

* :func:`should_retry` -- is another attempt allowed?
* :func:`compute_backoff` -- how long to wait before it.

Rate-limit answers (``429``) and server errors (``5xx``) are retried, as
are timeouts and connection failures.  Every other status is final.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Return ``True`` when attempt ``attempt + 1`` may be issued.

    Parameters
    ----------
    status_code:
        Status of the failed response, or ``None`` when no response arrived.
    exception:
        The transport exception, or ``None`` when a response arrived.
    attempt:
        The 0-based number of the attempt that just failed.
    max_attempts:
        Total attempts allowed, including the first.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, _RETRYABLE_EXCEPTIONS)
    return status_code in RETRYABLE_STATUSES


def parse_retry_after(response: httpx.Response) -> float | None:
    """Return the ``Retry-After`` header in seconds, if it is numeric."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return None


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 30.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Return the delay in seconds before the next attempt.

    A server-supplied *retry_after* wins; otherwise the delay grows as
    ``base * 2 ** attempt`` up to *maximum*.  With *jitter* the result is
    scaled by a random factor in ``[0.5, 1.0)``.

    >>> compute_backoff(3, base=1.0, maximum=30.0, jitter=False)
    8.0
    >>> compute_backoff(10, base=1.0, maximum=30.0, jitter=False)
    30.0
    """
    delay = retry_after if retry_after is not None else min(base * (2 ** attempt), maximum)
    if jitter:
        delay *= 0.5 + random.random() * 0.5
    return delay
