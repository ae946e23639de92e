"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Core value types shared by drivers, strategies, and the cache facade.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

JsonPrimitive: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonPrimitive | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class StrategyResult(Generic[T]):
    """
    Outcome of one strategy invocation.

    Attributes:
        value: Cached or freshly produced value.
        served_from_cache: ``True`` when ``value`` came from the driver.
    """

    value: T
    served_from_cache: bool
