"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Counters emitted by the strategy engine, and sinks that record them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

CACHE_HITS = "cache_hits_total"
CACHE_MISSES = "cache_misses_total"
CACHE_REFRESHES = "cache_refreshes_total"
CACHE_REFRESH_FAILURES = "cache_refresh_failures_total"

CACHE_COUNTERS: dict[str, str] = {
    CACHE_HITS: "Lookups answered from a stored entry.",
    CACHE_MISSES: "Lookups that ran the producer because no entry was stored.",
    CACHE_REFRESHES: "Background updates that replaced a served entry.",
    CACHE_REFRESH_FAILURES: "Background updates whose producer or write failed.",
}


class CacheMetrics(Protocol):
    """Sink for the cache counters listed in `CACHE_COUNTERS`."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment counter `name`; `tags` carries the ``strategy`` label."""


class NoOpCacheMetrics:
    """Default sink when no metrics backend is configured."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        return None


class PrometheusCacheMetrics:
    """
    Export the cache counters through `prometheus_client`.

    All four counters are registered up front as
    ``<namespace>_cache_*_total{strategy=...}``. Unknown counter names raise
    `ValueError`.
    """

    def __init__(self, *, namespace: str = "stash", registry: Any = None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCacheMetrics requires `prometheus_client` to be installed."
            ) from exc

        target = registry if registry is not None else REGISTRY
        self._counters = {
            name: Counter(
                name=name,
                documentation=doc,
                namespace=namespace,
                labelnames=("strategy",),
                registry=target,
            )
            for name, doc in CACHE_COUNTERS.items()
        }

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        counter = self._counters.get(name)
        if counter is None:
            raise ValueError(f"Unknown cache metric: {name!r}")
        strategy = (tags or {}).get("strategy", "unknown")
        counter.labels(strategy=strategy).inc(value)
