from __future__ import annotations

import pytest

from stash import (
    CacheConfigurationError,
    CacheDriverType,
    CacheSettings,
    InMemoryCacheDriver,
    create_cache_driver,
    create_cache_driver_from_env,
)
from stash.drivers import resolve_driver_type
from stash.drivers.redis import RedisCacheDriver
from stash.drivers.sqlite import SQLiteCacheDriver

_ENV_VARS = (
    "STASH_STRATEGY",
    "STASH_DRIVER",
    "STASH_KEY_PREFIX",
    "STASH_MEMORY_PREFIX",
    "STASH_REDIS_URL",
    "STASH_REDIS_HOST",
    "STASH_REDIS_PORT",
    "STASH_REDIS_DB",
    "STASH_REDIS_PASSWORD",
    "STASH_REDIS_CACHE_NAME",
    "STASH_SQLITE_PATH",
    "STASH_SQLITE_STORE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults():
    settings = CacheSettings.from_env()
    assert settings == CacheSettings()
    assert settings.redis_url == "redis://localhost:6379/0"


def test_settings_read_env_overrides(monkeypatch):
    monkeypatch.setenv("STASH_STRATEGY", "cacheFirstThenUpdate")
    monkeypatch.setenv("STASH_DRIVER", " SQLite ")
    monkeypatch.setenv("STASH_KEY_PREFIX", "svc")
    monkeypatch.setenv("STASH_SQLITE_PATH", "/tmp/cache.db")
    monkeypatch.setenv("STASH_SQLITE_STORE", "responses")

    settings = CacheSettings.from_env()
    assert settings.strategy == "cacheFirstThenUpdate"
    assert settings.driver_kind == "sqlite"
    assert settings.key_prefix == "svc"
    assert settings.sqlite_path == "/tmp/cache.db"
    assert settings.sqlite_store_name == "responses"


def test_settings_build_redis_url_from_parts(monkeypatch):
    monkeypatch.setenv("STASH_REDIS_HOST", "redis-host")
    monkeypatch.setenv("STASH_REDIS_PORT", "6380")
    monkeypatch.setenv("STASH_REDIS_DB", "9")
    monkeypatch.setenv("STASH_REDIS_PASSWORD", "secret")
    assert CacheSettings.from_env().redis_url == "redis://:secret@redis-host:6380/9"

    monkeypatch.setenv("STASH_REDIS_URL", "redis://explicit:1234/2")
    assert CacheSettings.from_env().redis_url == "redis://explicit:1234/2"


def test_driver_factory_defaults_to_in_memory():
    driver = create_cache_driver_from_env()
    assert isinstance(driver, InMemoryCacheDriver)
    assert driver.prefix == "default-"


def test_driver_factory_sqlite_from_env(monkeypatch, tmp_path):
    db_path = str(tmp_path / "cache.sqlite3")
    monkeypatch.setenv("STASH_DRIVER", "sqlite")
    monkeypatch.setenv("STASH_SQLITE_PATH", db_path)
    monkeypatch.setenv("STASH_SQLITE_STORE", "responses")

    driver = create_cache_driver_from_env()
    assert isinstance(driver, SQLiteCacheDriver)
    assert driver.path == db_path
    assert driver.store_name == "responses"


def test_driver_factory_redis_with_injected_client(monkeypatch):
    monkeypatch.setenv("STASH_DRIVER", "redis")
    monkeypatch.setenv("STASH_REDIS_CACHE_NAME", "tests-cache")
    injected = object()

    driver = create_cache_driver_from_env(redis_client=injected)

    assert isinstance(driver, RedisCacheDriver)
    assert driver._redis is injected  # noqa: SLF001
    assert driver.cache_name == "tests-cache"


def test_driver_factory_redis_from_url(monkeypatch):
    pytest.importorskip("redis")
    monkeypatch.setenv("STASH_DRIVER", "redis")
    monkeypatch.setenv("STASH_REDIS_URL", "redis://cache-host:6379/3")

    driver = create_cache_driver_from_env()
    assert isinstance(driver, RedisCacheDriver)
    assert driver.url == "redis://cache-host:6379/3"


def test_driver_factory_invalid_backend_raises(monkeypatch):
    monkeypatch.setenv("STASH_DRIVER", "IndexedDB")
    with pytest.raises(CacheConfigurationError, match="Unsupported cache driver type"):
        create_cache_driver_from_env()


def test_configuration_errors_are_value_errors():
    with pytest.raises(ValueError):
        create_cache_driver("bad-backend")


def test_driver_type_aliases():
    assert resolve_driver_type("in_memory") is CacheDriverType.MEMORY
    assert resolve_driver_type("MEM") is CacheDriverType.MEMORY
    assert resolve_driver_type("sqlite3") is CacheDriverType.SQLITE
    assert resolve_driver_type(CacheDriverType.REDIS) is CacheDriverType.REDIS


def test_memory_driver_prefix_from_factory():
    driver = create_cache_driver("memory", memory_prefix="svc-", memory_store={})
    assert isinstance(driver, InMemoryCacheDriver)
    assert driver.prefix == "svc-"
