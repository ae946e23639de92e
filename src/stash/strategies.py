"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Strategy engine: decides whether a cached value is served, when the
underlying value is refreshed, and whether the refresh blocks the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from .drivers.base import CacheDriver
from .errors import CacheConfigurationError
from .metrics import (
    CACHE_HITS,
    CACHE_MISSES,
    CACHE_REFRESH_FAILURES,
    CACHE_REFRESHES,
    CacheMetrics,
    NoOpCacheMetrics,
)
from .types import StrategyResult
from .utils import resolve_maybe_awaitable

logger = logging.getLogger("stash.strategies")

ProducerFn = Callable[[], Awaitable[Any] | Any]


class CacheStrategy(str, Enum):
    """Population/refresh strategies selectable by tag."""

    JUST_CACHE = "justCache"
    CACHE_FIRST_THEN_UPDATE = "cacheFirstThenUpdate"


def resolve_strategy(tag: str | CacheStrategy) -> CacheStrategy:
    """Validate a strategy tag. Raises `CacheConfigurationError` when unknown."""
    if isinstance(tag, CacheStrategy):
        return tag
    try:
        return CacheStrategy(tag)
    except ValueError:
        raise CacheConfigurationError(f"Unsupported caching strategy: {tag}") from None


class StrategyEngine:
    """
    Run one strategy invocation against a driver.

    ``justCache`` fills the cache once and serves from it afterwards.
    ``cacheFirstThenUpdate`` serves a cached value immediately and refreshes
    it in a detached background task; misses behave like ``justCache``.

    Background refreshes are never joined by callers. Overlapping refreshes
    for the same key are not coalesced; the last write wins.
    """

    def __init__(self, driver: CacheDriver, *, metrics: CacheMetrics | None = None) -> None:
        self._driver = driver
        self._metrics = metrics or NoOpCacheMetrics()
        self._refreshes: set[asyncio.Task[None]] = set()

    @property
    def driver(self) -> CacheDriver:
        return self._driver

    @property
    def pending_refreshes(self) -> int:
        """Number of background refreshes still in flight."""
        return len(self._refreshes)

    async def run(
        self,
        key: str,
        producer: ProducerFn,
        strategy: str | CacheStrategy = CacheStrategy.JUST_CACHE,
    ) -> StrategyResult[Any]:
        """Execute `strategy` for `key`, invoking `producer` when needed."""
        resolved = resolve_strategy(strategy)
        tags = {"strategy": resolved.value}

        cached = await self._driver.get(key)
        if cached is not None:
            self._metrics.incr(CACHE_HITS, tags=tags)
            if resolved is CacheStrategy.CACHE_FIRST_THEN_UPDATE:
                self._schedule_refresh(key, producer, tags)
            return StrategyResult(value=cached, served_from_cache=True)

        self._metrics.incr(CACHE_MISSES, tags=tags)
        fresh = await self._produce_and_store(key, producer)
        return StrategyResult(value=fresh, served_from_cache=False)

    async def _produce_and_store(self, key: str, producer: ProducerFn) -> Any:
        """Foreground miss path: producer and write errors propagate."""
        try:
            fresh = await resolve_maybe_awaitable(producer())
        except Exception as exc:
            logger.error("Error producing value for %s: %s", key, exc)
            raise
        await self._driver.set(key, fresh)
        return fresh

    def _schedule_refresh(
        self, key: str, producer: ProducerFn, tags: dict[str, str]
    ) -> None:
        refresh = asyncio.create_task(self._refresh(key, producer, tags))
        self._refreshes.add(refresh)
        refresh.add_done_callback(self._refreshes.discard)

    async def _refresh(self, key: str, producer: ProducerFn, tags: dict[str, str]) -> None:
        """Background refresh: failures are logged, never raised."""
        try:
            fresh = await resolve_maybe_awaitable(producer())
            await self._driver.set(key, fresh)
        except asyncio.CancelledError:
            raise
        except Exception:
            self._metrics.incr(CACHE_REFRESH_FAILURES, tags=tags)
            logger.exception("Background update failed for %s", key)
            return
        self._metrics.incr(CACHE_REFRESHES, tags=tags)

    async def drain(self) -> None:
        """Wait for every background refresh started so far."""
        while self._refreshes:
            await asyncio.gather(*list(self._refreshes), return_exceptions=True)
