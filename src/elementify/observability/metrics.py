"""Metrics hook protocol and no-op default implementation.

The converter reports a handful of counters and timings per transform.  By
default a :class:`NoopMetricsHook` receives them, so there is no overhead.
Supply any object satisfying :class:`MetricsHook` through
``ElementifyConfig(metrics=...)`` to forward them to StatsD, Prometheus or
similar.

Emitted metric names:

* ``elementify.transforms_total``       -- counter, tagged ``source``
* ``elementify.transform_duration_ms``  -- timing
* ``elementify.parse_errors_total``     -- counter
* ``elementify.footnotes_total``        -- counter
* ``elementify.elements_total``         -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

METRIC_TRANSFORMS = "elementify.transforms_total"
METRIC_DURATION = "elementify.transform_duration_ms"
METRIC_PARSE_ERRORS = "elementify.parse_errors_total"
METRIC_FOOTNOTES = "elementify.footnotes_total"
METRIC_ELEMENTS = "elementify.elements_total"


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points.

    Call sites never need ``if metrics is not None`` guards.
    """

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
