"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Storage drivers for the stash cache layer.
"""

from .base import BaseCacheDriver, CacheDriver
from .factory import (
    CacheDriverType,
    create_cache_driver,
    create_cache_driver_from_env,
    create_cache_driver_from_settings,
    resolve_driver_type,
)
from .memory import InMemoryCacheDriver

__all__ = [
    "CacheDriver",
    "BaseCacheDriver",
    "InMemoryCacheDriver",
    "CacheDriverType",
    "resolve_driver_type",
    "create_cache_driver",
    "create_cache_driver_from_env",
    "create_cache_driver_from_settings",
]


# Lazy import for drivers with optional dependencies
def __getattr__(name: str):
    """Lazily expose optional drivers that require extra dependencies."""
    if name == "RedisCacheDriver":
        from .redis import RedisCacheDriver

        return RedisCacheDriver
    if name == "SQLiteCacheDriver":
        from .sqlite import SQLiteCacheDriver

        return SQLiteCacheDriver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
