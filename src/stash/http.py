"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

One-shot helpers that fetch JSON over HTTP through a cache manager.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from .drivers.base import CacheDriver
from .drivers.factory import CacheDriverType
from .keys import QueryParams
from .manager import CacheManager
from .strategies import CacheStrategy
from .types import JsonValue, StrategyResult

logger = logging.getLogger("stash.http")


def request_params(params: QueryParams | None) -> list[tuple[str, Any]]:
    """
    Expand query parameters into the pairs sent on the wire.

    Pairs are ordered by key; list and tuple values become repeated pairs in
    their own order and `None` values are dropped.
    """
    if not params:
        return []
    pairs = params.items() if isinstance(params, Mapping) else params
    expanded: list[tuple[str, Any]] = []
    for key, value in pairs:
        values = value if isinstance(value, (list, tuple)) else [value]
        expanded.extend((str(key), item) for item in values if item is not None)
    return sorted(expanded, key=lambda pair: pair[0])


def build_fetch(
    url: str,
    *,
    params: QueryParams | None = None,
    body: Any = None,
    method: str = "GET",
    client: httpx.AsyncClient | None = None,
    **request_kwargs: Any,
) -> Callable[[], Awaitable[JsonValue]]:
    """
    Build a producer that performs one HTTP request and returns its JSON body.

    Query parameters are sent as real parameters (see `request_params`); the
    cache key keeps its own canonical encoding. Non-2xx responses raise
    `httpx.HTTPStatusError`.

    Args:
        url: Target URL.
        params: Query parameters.
        body: JSON request body.
        method: HTTP method.
        client: Reused client; a short-lived one is opened per call otherwise.
        **request_kwargs: Extra arguments forwarded to `AsyncClient.request`.
    """
    query = request_params(params)

    async def _send(http: httpx.AsyncClient) -> JsonValue:
        logger.debug("Fetching %s %s", method, url)
        response = await http.request(
            method,
            url,
            params=query or None,
            json=body,
            **request_kwargs,
        )
        response.raise_for_status()
        return response.json()

    async def fetch() -> JsonValue:
        if client is not None:
            return await _send(client)
        async with httpx.AsyncClient() as http:
            return await _send(http)

    return fetch


def create_cache_manager(
    driver: str | CacheDriverType | CacheDriver = CacheDriverType.MEMORY,
    **kwargs: Any,
) -> CacheManager:
    """Create a new cache manager for `driver`."""
    return CacheManager(driver, **kwargs)


async def cache_api_call(
    url: str,
    *,
    params: QueryParams | None = None,
    body: Any = None,
    method: str = "GET",
    strategy: str | CacheStrategy = CacheStrategy.JUST_CACHE,
    driver: str | CacheDriverType | CacheDriver = CacheDriverType.MEMORY,
    client: httpx.AsyncClient | None = None,
    manager: CacheManager | None = None,
    **request_kwargs: Any,
) -> StrategyResult[JsonValue]:
    """
    Fetch JSON from `url` through the cache.

    A supplied `manager` is left open. Otherwise a manager is created for
    `driver` and closed before returning; with ``cacheFirstThenUpdate`` that
    means the background refresh is awaited first.
    """
    fetch = build_fetch(
        url,
        params=params,
        body=body,
        method=method,
        client=client,
        **request_kwargs,
    )
    if manager is not None:
        return await manager.cache_api_call(
            url, fetch, params=params, body=body, strategy=strategy
        )
    owned = CacheManager(driver)
    try:
        return await owned.cache_api_call(
            url, fetch, params=params, body=body, strategy=strategy
        )
    finally:
        await owned.aclose()


def cache_function(
    fn: Callable[..., Any],
    *,
    strategy: str | CacheStrategy = CacheStrategy.JUST_CACHE,
    driver: str | CacheDriverType | CacheDriver = CacheDriverType.MEMORY,
    key_prefix: str = "",
    manager: CacheManager | None = None,
) -> Callable[..., Any]:
    """
    Wrap `fn` with a cache manager.

    A supplied `manager` is shared and left open. Otherwise the helper owns a
    manager for `driver` and closes its connection after every call; drivers
    reconnect lazily on the next one.
    """
    if manager is not None:
        return manager.wrap_function(fn, strategy=strategy, key_prefix=key_prefix)

    owned = CacheManager(driver)
    wrapped = owned.wrap_function(fn, strategy=strategy, key_prefix=key_prefix)

    @functools.wraps(fn)
    async def cached(*args: Any, **kwargs: Any) -> StrategyResult[Any]:
        try:
            return await wrapped(*args, **kwargs)
        finally:
            await owned.aclose()

    return cached
