"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache facade binding one driver to the strategy engine and key deriver.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Mapping
from typing import Any

from .drivers.base import CacheDriver
from .drivers.factory import CacheDriverType, create_cache_driver, create_cache_driver_from_settings
from .keys import (
    ApiCall,
    CallDescription,
    FunctionCall,
    QueryParams,
    api_cache_key,
    function_cache_key,
    function_name,
)
from .metrics import CacheMetrics
from .settings import CacheSettings
from .strategies import CacheStrategy, ProducerFn, StrategyEngine, resolve_strategy
from .types import JsonValue, StrategyResult

logger = logging.getLogger("stash.manager")


class CacheManager:
    """
    Main entry point for cache-aware calls.

    Wraps API calls and arbitrary functions with a caching strategy over one
    driver. Every wrapped call returns a `StrategyResult`; callers unwrap
    ``.value``.

    Args:
        driver: Driver kind (`memory`, `redis`, `sqlite`) or a driver instance.
        strategy: Default strategy for calls that do not pass one.
        key_prefix: Default prefix for wrapped-function keys.
        metrics: Optional metrics sink forwarded to the strategy engine.
    """

    def __init__(
        self,
        driver: str | CacheDriverType | CacheDriver = CacheDriverType.MEMORY,
        *,
        strategy: str | CacheStrategy = CacheStrategy.JUST_CACHE,
        key_prefix: str = "",
        metrics: CacheMetrics | None = None,
    ) -> None:
        self._strategy = resolve_strategy(strategy)
        if isinstance(driver, (str, CacheDriverType)):
            driver = create_cache_driver(driver)
        self._driver = driver
        self._key_prefix = key_prefix
        self._engine = StrategyEngine(driver, metrics=metrics)

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        *,
        redis_client: Any | None = None,
        metrics: CacheMetrics | None = None,
    ) -> "CacheManager":
        """Build a manager and its driver from explicit settings."""
        strategy = resolve_strategy(settings.strategy)
        return cls(
            create_cache_driver_from_settings(settings, redis_client=redis_client),
            strategy=strategy,
            key_prefix=settings.key_prefix,
            metrics=metrics,
        )

    @property
    def driver(self) -> CacheDriver:
        return self._driver

    @property
    def strategy(self) -> CacheStrategy:
        return self._strategy

    @property
    def engine(self) -> StrategyEngine:
        return self._engine

    # -- driver passthroughs ------------------------------------------------

    async def get(self, key: str) -> JsonValue | None:
        return await self._driver.get(key)

    async def set(self, key: str, value: JsonValue) -> None:
        await self._driver.set(key, value)

    async def delete(self, key: str) -> bool:
        return await self._driver.delete(key)

    async def clear(self) -> None:
        await self._driver.clear()

    async def has(self, key: str) -> bool:
        return await self._driver.has(key)

    async def keys(self) -> list[str]:
        return await self._driver.keys()

    # -- key derivation -----------------------------------------------------

    def api_cache_key(
        self,
        url: str,
        params: QueryParams | None = None,
        body: Any = None,
    ) -> str:
        return api_cache_key(url, params, body)

    def function_cache_key(
        self,
        name: str,
        args: tuple[Any, ...] | list[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> str:
        return function_cache_key(name, args, kwargs)

    # -- wrapping -----------------------------------------------------------

    async def wrap_call(
        self,
        description: CallDescription,
        producer: ProducerFn,
        strategy: str | CacheStrategy | None = None,
    ) -> StrategyResult[Any]:
        """Derive the key for `description` and run the selected strategy."""
        resolved = self._strategy if strategy is None else resolve_strategy(strategy)
        return await self._engine.run(description.cache_key(), producer, resolved)

    async def cache_api_call(
        self,
        url: str,
        fetch: ProducerFn,
        *,
        params: QueryParams | None = None,
        body: Any = None,
        strategy: str | CacheStrategy | None = None,
    ) -> StrategyResult[Any]:
        """Cache the result of `fetch` under the key of the described API call."""
        return await self.wrap_call(ApiCall(url, params, body), fetch, strategy)

    def wrap_function(
        self,
        fn: Callable[..., Any],
        *,
        strategy: str | CacheStrategy | None = None,
        key_prefix: str | None = None,
    ) -> Callable[..., Any]:
        """
        Return an async callable that caches `fn` per argument list.

        The strategy is validated now, not on first call. `fn` may be sync or
        async; the wrapper always returns a `StrategyResult`.
        """
        resolved = self._strategy if strategy is None else resolve_strategy(strategy)
        prefix = self._key_prefix if key_prefix is None else key_prefix
        name = function_name(fn)

        @functools.wraps(fn)
        async def cached(*args: Any, **kwargs: Any) -> StrategyResult[Any]:
            key = FunctionCall(name, args, kwargs).cache_key()
            if prefix:
                key = f"{prefix}:{key}"
            return await self._engine.run(key, lambda: fn(*args, **kwargs), resolved)

        return cached

    cache_function = wrap_function

    # -- lifecycle ----------------------------------------------------------

    async def drain(self) -> None:
        """Wait for in-flight background refreshes."""
        await self._engine.drain()

    async def aclose(self) -> None:
        """Drain refreshes, then close the driver when it holds a connection."""
        await self.drain()
        close = getattr(self._driver, "aclose", None)
        if close is not None:
            await close()
            logger.debug("Cache driver closed (driver=%s)", self._driver.driver_id)
