"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache-aware wrappers for API calls and functions over pluggable storage drivers.

Provides a ``CacheManager`` facade with two strategies (``justCache`` and
``cacheFirstThenUpdate``) over in-memory, Redis, or SQLite drivers.

Quick start::

    from stash import CacheManager, CacheStrategy

    cache = CacheManager("memory")
    result = await cache.cache_api_call(
        "https://example.com/posts",
        fetch_posts,
        params={"userId": 1},
        strategy=CacheStrategy.CACHE_FIRST_THEN_UPDATE,
    )
    posts = result.value
"""

from .drivers import (
    BaseCacheDriver,
    CacheDriver,
    CacheDriverType,
    InMemoryCacheDriver,
    create_cache_driver,
    create_cache_driver_from_env,
    create_cache_driver_from_settings,
)
from .errors import (
    CacheConfigurationError,
    CacheError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from .keys import (
    ApiCall,
    CallDescription,
    FunctionCall,
    api_cache_key,
    canonical_query,
    function_cache_key,
    function_name,
)
from .manager import CacheManager
from .metrics import CacheMetrics, NoOpCacheMetrics, PrometheusCacheMetrics
from .settings import CacheSettings
from .strategies import CacheStrategy, StrategyEngine, resolve_strategy
from .types import JsonObject, JsonValue, StrategyResult

__all__ = [
    "CacheManager",
    "CacheStrategy",
    "StrategyEngine",
    "StrategyResult",
    "resolve_strategy",
    "CacheDriver",
    "BaseCacheDriver",
    "InMemoryCacheDriver",
    "CacheDriverType",
    "create_cache_driver",
    "create_cache_driver_from_env",
    "create_cache_driver_from_settings",
    "ApiCall",
    "FunctionCall",
    "CallDescription",
    "api_cache_key",
    "function_cache_key",
    "function_name",
    "canonical_query",
    "CacheSettings",
    "CacheMetrics",
    "NoOpCacheMetrics",
    "PrometheusCacheMetrics",
    "CacheError",
    "CacheConfigurationError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "JsonValue",
    "JsonObject",
]


# Lazy import for drivers and helpers with optional dependencies
def __getattr__(name: str):
    """Lazily expose drivers and helpers that require extra dependencies."""
    if name == "RedisCacheDriver":
        from .drivers.redis import RedisCacheDriver

        return RedisCacheDriver
    if name == "SQLiteCacheDriver":
        from .drivers.sqlite import SQLiteCacheDriver

        return SQLiteCacheDriver
    if name in ("cache_api_call", "cache_function", "create_cache_manager", "build_fetch"):
        from . import http

        return getattr(http, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
