"""Metrics hook protocol and its no-op default.

Pass any object with ``increment`` and ``timing`` methods as
``NotionpressConfig.metrics`` to route data points to StatsD, Prometheus
or another backend.  Emitted names:

* ``notionpress.requests_total`` -- counter, tagged ``method``/``status``
* ``notionpress.retries_total`` -- counter, tagged ``reason``
* ``notionpress.request_duration_ms`` -- timing
* ``notionpress.blocks_created_total`` -- counter
* ``notionpress.blocks_dropped_total`` -- counter (bisection skips)
* ``notionpress.conversion_warnings_total`` -- counter
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Interface a metrics backend must provide."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Add *value* to the counter *name*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds under *name*."""
        ...


class NoopMetricsHook:
    """Discard every data point."""

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


def resolve_metrics(hook: Any | None) -> MetricsHook:
    """Return *hook*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return hook if hook is not None else NoopMetricsHook()
