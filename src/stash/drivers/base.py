"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Storage driver contract and the shared failure policy for bundled drivers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from ..errors import StorageReadError, StorageWriteError
from ..types import JsonValue
from ..utils import json_dumps, json_loads

logger = logging.getLogger("stash.drivers")


@runtime_checkable
class CacheDriver(Protocol):
    """
    Protocol implemented by every storage backend used by the strategy engine.

    ``get`` and ``has`` never raise on backend failure; ``set``, ``delete`` and
    ``clear`` raise ``StorageWriteError``.
    """

    driver_id: str

    async def get(self, key: str) -> JsonValue | None: ...

    async def set(self, key: str, value: JsonValue) -> None: ...

    async def delete(self, key: str) -> bool: ...

    async def clear(self) -> None: ...

    async def has(self, key: str) -> bool: ...

    async def keys(self) -> list[str]: ...


class BaseCacheDriver(ABC):
    """
    Shared driver logic for storage-backed implementations.

    Backends only implement raw primitives over serialized (JSON text) values
    in their own namespace. This class applies serialization and the
    read-degrades / write-raises failure policy.
    """

    driver_id: str = "base"

    @abstractmethod
    async def _read(self, key: str) -> str | bytes | None:
        """Return the serialized value for ``key``, or ``None`` when absent."""

    @abstractmethod
    async def _write(self, key: str, payload: str) -> None:
        """Store one serialized value, overwriting any previous one."""

    @abstractmethod
    async def _remove(self, key: str) -> bool:
        """Remove one key; return whether it existed."""

    @abstractmethod
    async def _exists(self, key: str) -> bool:
        """Existence check without loading the value."""

    @abstractmethod
    async def _remove_all(self) -> None:
        """Remove every key in this driver's namespace."""

    @abstractmethod
    async def _list_keys(self) -> list[str]:
        """Return un-namespaced keys in this driver's namespace."""

    async def get(self, key: str) -> JsonValue | None:
        """Return the cached value, or `None` when absent or unreadable."""
        try:
            raw = await self._read(key)
            if raw is None:
                return None
            return json_loads(raw)
        except Exception as exc:
            logger.warning("Cache get failed (driver=%s, key=%s): %s", self.driver_id, key, exc)
            return None

    async def set(self, key: str, value: JsonValue) -> None:
        """Store ``value`` under ``key``. Raises `StorageWriteError` on failure."""
        try:
            payload = json_dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageWriteError(
                self.driver_id, "set", f"value for {key!r} is not serializable: {exc}"
            ) from exc
        try:
            await self._write(key, payload)
        except Exception as exc:
            raise StorageWriteError(self.driver_id, "set", str(exc)) from exc

    async def delete(self, key: str) -> bool:
        try:
            return await self._remove(key)
        except Exception as exc:
            raise StorageWriteError(self.driver_id, "delete", str(exc)) from exc

    async def clear(self) -> None:
        try:
            await self._remove_all()
        except Exception as exc:
            raise StorageWriteError(self.driver_id, "clear", str(exc)) from exc

    async def has(self, key: str) -> bool:
        try:
            return await self._exists(key)
        except Exception as exc:
            logger.warning("Cache has failed (driver=%s, key=%s): %s", self.driver_id, key, exc)
            return False

    async def keys(self) -> list[str]:
        """List keys in this driver's namespace. Raises `StorageReadError`."""
        try:
            return sorted(await self._list_keys())
        except Exception as exc:
            raise StorageReadError(self.driver_id, "keys", str(exc)) from exc
