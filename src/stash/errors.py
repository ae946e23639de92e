"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Exception taxonomy for cache drivers, strategies, and configuration.
"""

from __future__ import annotations


class CacheError(RuntimeError):
    """Base class for every error raised by the cache layer itself."""


class CacheConfigurationError(CacheError, ValueError):
    """Raised for unknown strategy tags, driver kinds, or invalid settings."""


class StorageError(CacheError):
    """
    Raised when a storage backend operation fails.

    The backend-specific exception is chained as ``__cause__``.
    """

    def __init__(self, driver_id: str, operation: str, message: str) -> None:
        super().__init__(f"[{driver_id}] {operation} failed: {message}")
        self.driver_id = driver_id
        self.operation = operation


class StorageReadError(StorageError):
    """Backend read failed. Downgraded to a cache miss on `get`/`has`."""


class StorageWriteError(StorageError):
    """Backend write, delete, or clear failed."""
