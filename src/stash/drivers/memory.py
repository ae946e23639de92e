"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-process cache driver over a prefixed key-value map.
"""

from __future__ import annotations

from collections.abc import MutableMapping

from ..errors import CacheConfigurationError
from .base import BaseCacheDriver

# Process-wide map shared by every driver that does not bring its own store.
_SHARED_STORE: dict[str, str] = {}
# Prefixes claimed on _SHARED_STORE; never released.
_SHARED_PREFIXES: set[str] = set()


def _claim_shared_prefix(prefix: str) -> None:
    for claimed in _SHARED_PREFIXES:
        if claimed != prefix and (claimed.startswith(prefix) or prefix.startswith(claimed)):
            raise CacheConfigurationError(
                f"Memory cache prefix {prefix!r} overlaps prefix {claimed!r} "
                "on the shared store"
            )
    _SHARED_PREFIXES.add(prefix)


class InMemoryCacheDriver(BaseCacheDriver):
    """
    Cache driver storing JSON text in a flat string map under a key prefix.

    Several drivers may share one map; each only sees and clears keys that
    start with its own prefix, so prefixes on one map must not nest (``a-``
    would also list and clear the keys of ``a-b-``). Nested prefixes on the
    process-wide map raise `CacheConfigurationError`; callers injecting a
    `store` keep its prefixes disjoint themselves. Drivers with the same
    prefix share entries. Suitable for single-process systems and testing.
    Entries are lost on process restart.

    Args:
        prefix: Prefix prepended to every key.
        store: Backing map. Defaults to the process-wide shared map.
    """

    driver_id = "memory"

    def __init__(
        self,
        prefix: str = "default-",
        *,
        store: MutableMapping[str, str] | None = None,
    ) -> None:
        if store is None:
            _claim_shared_prefix(prefix)
            store = _SHARED_STORE
        self._prefix = prefix
        self._store = store

    @property
    def prefix(self) -> str:
        return self._prefix

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def _read(self, key: str) -> str | None:
        return self._store.get(self._full_key(key))

    async def _write(self, key: str, payload: str) -> None:
        self._store[self._full_key(key)] = payload

    async def _remove(self, key: str) -> bool:
        full_key = self._full_key(key)
        if full_key not in self._store:
            return False
        del self._store[full_key]
        return True

    async def _exists(self, key: str) -> bool:
        return self._full_key(key) in self._store

    async def _remove_all(self) -> None:
        for stored_key in [k for k in self._store if k.startswith(self._prefix)]:
            self._store.pop(stored_key, None)

    async def _list_keys(self) -> list[str]:
        size = len(self._prefix)
        return [k[size:] for k in list(self._store) if k.startswith(self._prefix)]
