"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting cache drivers by kind or from environment variables.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import CacheConfigurationError
from ..settings import CacheSettings
from .base import CacheDriver
from .memory import InMemoryCacheDriver


class CacheDriverType(str, Enum):
    """Supported storage backend kinds."""

    MEMORY = "memory"
    REDIS = "redis"
    SQLITE = "sqlite"


_ALIASES: dict[str, CacheDriverType] = {
    "mem": CacheDriverType.MEMORY,
    "memory": CacheDriverType.MEMORY,
    "inmemory": CacheDriverType.MEMORY,
    "in_memory": CacheDriverType.MEMORY,
    "redis": CacheDriverType.REDIS,
    "sqlite": CacheDriverType.SQLITE,
    "sqlite3": CacheDriverType.SQLITE,
}


def resolve_driver_type(kind: str | CacheDriverType) -> CacheDriverType:
    """Normalize a driver kind, raising `CacheConfigurationError` when unknown."""
    if isinstance(kind, CacheDriverType):
        return kind
    resolved = _ALIASES.get(str(kind).strip().lower())
    if resolved is None:
        raise CacheConfigurationError(f"Unsupported cache driver type: {kind}")
    return resolved


def create_cache_driver(
    kind: str | CacheDriverType = CacheDriverType.MEMORY,
    *,
    memory_prefix: str = "default-",
    memory_store: MutableMapping[str, str] | None = None,
    redis_client: Any | None = None,
    redis_url: str | None = None,
    redis_cache_name: str = "default-cache",
    sqlite_path: str | Path = "stash-cache.sqlite3",
    sqlite_store_name: str = "api-cache",
) -> CacheDriver:
    """
    Create a cache driver for `kind`.

    Backends:
    - `memory` (default): prefixed in-process map
    - `redis`: named hash; uses `redis_client` or builds one from `redis_url`
    - `sqlite`: named table in the database at `sqlite_path`
    """
    driver_type = resolve_driver_type(kind)

    if driver_type is CacheDriverType.MEMORY:
        return InMemoryCacheDriver(memory_prefix, store=memory_store)

    if driver_type is CacheDriverType.REDIS:
        from .redis import RedisCacheDriver

        if redis_client is None:
            try:
                import redis.asyncio  # noqa: F401
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Redis cache driver requires `redis` to be installed."
                ) from exc
        return RedisCacheDriver(
            redis_client,
            url=redis_url or "redis://localhost:6379/0",
            cache_name=redis_cache_name,
        )

    from .sqlite import SQLiteCacheDriver

    return SQLiteCacheDriver(sqlite_path, store_name=sqlite_store_name)


def create_cache_driver_from_settings(
    settings: CacheSettings,
    *,
    redis_client: Any | None = None,
) -> CacheDriver:
    """Create the driver described by `settings`."""
    return create_cache_driver(
        settings.driver_kind,
        memory_prefix=settings.memory_prefix,
        redis_client=redis_client,
        redis_url=settings.redis_url,
        redis_cache_name=settings.redis_cache_name,
        sqlite_path=settings.sqlite_path,
        sqlite_store_name=settings.sqlite_store_name,
    )


def create_cache_driver_from_env(*, redis_client: Any | None = None) -> CacheDriver:
    """
    Create a cache driver from `STASH_*` environment variables.

    Redis resolution:
    - Uses the provided `redis_client` when supplied.
    - Otherwise builds a client from `STASH_REDIS_URL`.
    - If no URL is set, falls back to host/port/db/password variables.
    """
    return create_cache_driver_from_settings(
        CacheSettings.from_env(), redis_client=redis_client
    )
