"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache settings and explicit environment loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


def _redis_url_from_env() -> str:
    """Resolve a Redis URL from `STASH_REDIS_URL` or host/port/db/password parts."""
    url = _env_first("STASH_REDIS_URL")
    if url:
        return url
    host = _env_first("STASH_REDIS_HOST", default="localhost") or "localhost"
    port = _env_first("STASH_REDIS_PORT", default="6379") or "6379"
    db = _env_first("STASH_REDIS_DB", default="0") or "0"
    password = _env_first("STASH_REDIS_PASSWORD", default="") or ""
    if password:
        return f"redis://:{password}@{host}:{port}/{db}"
    return f"redis://{host}:{port}/{db}"


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """
    Explicit settings used to build a driver and a cache manager.

    Attributes:
        strategy: Default strategy tag (`justCache` or `cacheFirstThenUpdate`).
        driver_kind: Backend kind (`memory`, `redis`, `sqlite`).
        key_prefix: Prefix applied to wrapped-function cache keys.
        memory_prefix: Key prefix for the in-memory driver.
        redis_url: Connection URL for the Redis driver.
        redis_cache_name: Hash name owned by the Redis driver.
        sqlite_path: Database file for the SQLite driver.
        sqlite_store_name: Table owned by the SQLite driver.
    """

    strategy: str = "justCache"
    driver_kind: str = "memory"
    key_prefix: str = ""

    memory_prefix: str = "default-"
    redis_url: str = "redis://localhost:6379/0"
    redis_cache_name: str = "default-cache"
    sqlite_path: str = "stash-cache.sqlite3"
    sqlite_store_name: str = "api-cache"

    @staticmethod
    def from_env() -> "CacheSettings":
        """Load settings from `STASH_*` environment variables."""
        return CacheSettings(
            strategy=_env_first("STASH_STRATEGY", default="justCache") or "justCache",
            driver_kind=(_env_first("STASH_DRIVER", default="memory") or "memory").lower(),
            key_prefix=os.getenv("STASH_KEY_PREFIX", ""),
            memory_prefix=os.getenv("STASH_MEMORY_PREFIX", "default-"),
            redis_url=_redis_url_from_env(),
            redis_cache_name=(
                _env_first("STASH_REDIS_CACHE_NAME", default="default-cache")
                or "default-cache"
            ),
            sqlite_path=(
                _env_first("STASH_SQLITE_PATH", default="stash-cache.sqlite3")
                or "stash-cache.sqlite3"
            ),
            sqlite_store_name=(
                _env_first("STASH_SQLITE_STORE", default="api-cache") or "api-cache"
            ),
        )
