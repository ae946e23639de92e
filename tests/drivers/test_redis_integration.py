from __future__ import annotations

import os
import uuid

import pytest

from stash import CacheManager, CacheStrategy
from stash.drivers.redis import RedisCacheDriver


def _redis_url() -> str | None:
    return os.getenv("STASH_TEST_REDIS_URL")


@pytest.mark.skipif(_redis_url() is None, reason="STASH_TEST_REDIS_URL is not set")
@pytest.mark.asyncio
async def test_redis_driver_contract_with_real_redis():
    pytest.importorskip("redis.asyncio")
    driver = RedisCacheDriver(url=_redis_url(), cache_name=f"itest-{uuid.uuid4().hex}")
    try:
        assert await driver.get("k") is None
        await driver.set("k", {"v": 1})
        await driver.set("k", {"v": 2})
        assert await driver.get("k") == {"v": 2}
        assert await driver.keys() == ["k"]
        assert await driver.delete("missing") is False
        assert await driver.delete("k") is True
        await driver.set("a", 1)
        await driver.clear()
        assert await driver.has("a") is False
    finally:
        await driver.clear()
        await driver.aclose()


@pytest.mark.skipif(_redis_url() is None, reason="STASH_TEST_REDIS_URL is not set")
@pytest.mark.asyncio
async def test_stale_then_revalidate_with_real_redis():
    pytest.importorskip("redis.asyncio")
    driver = RedisCacheDriver(url=_redis_url(), cache_name=f"itest-{uuid.uuid4().hex}")
    cache = CacheManager(driver, strategy=CacheStrategy.CACHE_FIRST_THEN_UPDATE)
    versions = iter(["v1", "v2"])
    try:
        first = await cache.cache_api_call("/status", lambda: next(versions))
        second = await cache.cache_api_call("/status", lambda: next(versions))
        assert (first.value, first.served_from_cache) == ("v1", False)
        assert (second.value, second.served_from_cache) == ("v1", True)
        await cache.drain()
        assert await cache.get("api:/status::") == "v2"
    finally:
        await driver.clear()
        await cache.aclose()
