"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Redis-backed cache driver storing one named cache per hash.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import CacheConfigurationError
from .base import BaseCacheDriver

logger = logging.getLogger("stash.drivers.redis")


class RedisCacheDriver(BaseCacheDriver):
    """
    Cache driver for multi-process deployments.

    Uses one Redis hash (``{prefix}:{cache_name}``) per named cache, so
    ``clear`` drops exactly one cache and never touches other keys.

    Requires ``redis.asyncio`` (``pip install redis``) unless a client is
    injected.

    Args:
        redis: An ``redis.asyncio.Redis`` client instance.
        url: Connection URL used to build a client lazily when ``redis`` is
            not supplied.
        cache_name: Name of the cache (hash) owned by this driver.
        prefix: Key prefix for namespacing.
    """

    driver_id = "redis"

    def __init__(
        self,
        redis: Any | None = None,
        *,
        url: str | None = None,
        cache_name: str = "default-cache",
        prefix: str = "stash:cache",
    ) -> None:
        if redis is None and not url:
            raise CacheConfigurationError("RedisCacheDriver needs a client or a url")
        if not cache_name.strip():
            raise CacheConfigurationError("cache_name must be non-empty")
        self._redis = redis
        self._owns_client = redis is None
        self.url = url
        self.cache_name = cache_name
        self._prefix = prefix

    def _hash_key(self) -> str:
        """Redis hash key storing serialized cache values."""
        return f"{self._prefix}:{self.cache_name}"

    def _client(self) -> Any:
        """Return the Redis client, creating it on first use."""
        if self._redis is None:
            import redis.asyncio as redis

            self._redis = redis.Redis.from_url(self.url)
            logger.debug("Redis cache client created (cache=%s)", self.cache_name)
        return self._redis

    async def _read(self, key: str) -> str | bytes | None:
        return await self._client().hget(self._hash_key(), key)

    async def _write(self, key: str, payload: str) -> None:
        await self._client().hset(self._hash_key(), key, payload)

    async def _remove(self, key: str) -> bool:
        removed = await self._client().hdel(self._hash_key(), key)
        return int(removed) > 0

    async def _exists(self, key: str) -> bool:
        return bool(await self._client().hexists(self._hash_key(), key))

    async def _remove_all(self) -> None:
        await self._client().delete(self._hash_key())

    async def _list_keys(self) -> list[str]:
        raw_keys = await self._client().hkeys(self._hash_key())
        return [k.decode("utf-8") if isinstance(k, bytes) else str(k) for k in raw_keys]

    async def aclose(self) -> None:
        """Close the Redis client when this driver created it."""
        if self._owns_client and self._redis is not None:
            await self._redis.aclose()
            self._redis = None
