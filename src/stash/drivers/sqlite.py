"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

SQLite-backed cache driver storing one named object store per table.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Any

from ..errors import CacheConfigurationError
from .base import BaseCacheDriver

logger = logging.getLogger("stash.drivers.sqlite")

_STORE_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_\-]*$")


class SQLiteCacheDriver(BaseCacheDriver):
    """
    Persistent cache driver using one SQLite table as a named object store.

    The database connection and table are created lazily on first use and
    then shared for the lifetime of the driver. Concurrent first calls wait
    on the same initialization instead of opening extra connections.

    Requires ``aiosqlite``.

    Args:
        path: Database file path, or ``":memory:"``.
        store_name: Table owned by this driver.
    """

    driver_id = "sqlite"

    def __init__(
        self,
        path: str | Path = "stash-cache.sqlite3",
        *,
        store_name: str = "api-cache",
    ) -> None:
        if not _STORE_NAME_RE.match(store_name):
            raise CacheConfigurationError(
                f"Invalid SQLite store name {store_name!r}; "
                "use letters, digits, '_' or '-'"
            )
        self.path = str(path)
        self.store_name = store_name
        self._conn: Any | None = None
        self._init_lock = asyncio.Lock()

    @property
    def _table(self) -> str:
        return f'"{self.store_name}"'

    async def _connection(self) -> Any:
        """Open the database and create the store table exactly once."""
        if self._conn is not None:
            return self._conn
        async with self._init_lock:
            if self._conn is None:
                import aiosqlite

                if self.path != ":memory:":
                    Path(self.path).parent.mkdir(parents=True, exist_ok=True)
                conn = await aiosqlite.connect(self.path)
                try:
                    await conn.execute(
                        f"CREATE TABLE IF NOT EXISTS {self._table} ("
                        "key TEXT PRIMARY KEY, value TEXT NOT NULL)"
                    )
                    await conn.commit()
                except Exception:
                    await conn.close()
                    raise
                self._conn = conn
                logger.debug(
                    "SQLite cache store ready (path=%s, store=%s)", self.path, self.store_name
                )
        return self._conn

    async def _read(self, key: str) -> str | None:
        conn = await self._connection()
        async with conn.execute(
            f"SELECT value FROM {self._table} WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()
        return None if row is None else row[0]

    async def _write(self, key: str, payload: str) -> None:
        conn = await self._connection()
        await conn.execute(
            f"INSERT OR REPLACE INTO {self._table} (key, value) VALUES (?, ?)",
            (key, payload),
        )
        await conn.commit()

    async def _remove(self, key: str) -> bool:
        conn = await self._connection()
        cursor = await conn.execute(f"DELETE FROM {self._table} WHERE key = ?", (key,))
        removed = cursor.rowcount
        await cursor.close()
        await conn.commit()
        return removed > 0

    async def _exists(self, key: str) -> bool:
        conn = await self._connection()
        async with conn.execute(
            f"SELECT 1 FROM {self._table} WHERE key = ? LIMIT 1", (key,)
        ) as cursor:
            row = await cursor.fetchone()
        return row is not None

    async def _remove_all(self) -> None:
        conn = await self._connection()
        await conn.execute(f"DELETE FROM {self._table}")
        await conn.commit()

    async def _list_keys(self) -> list[str]:
        conn = await self._connection()
        async with conn.execute(f"SELECT key FROM {self._table}") as cursor:
            rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def aclose(self) -> None:
        """Close the shared connection if it was opened."""
        if self._conn is not None:
            conn, self._conn = self._conn, None
            await conn.close()
