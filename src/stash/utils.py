"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

JSON and awaitable helpers shared across the cache package.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Awaitable
from typing import Any, TypeVar, cast

from .types import JsonValue

T = TypeVar("T")


def json_dumps(obj: JsonValue | dict[str, Any] | list[Any] | Any) -> str:
    """Serialize a storable value. Raises on values JSON cannot represent."""
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def json_loads(s: str | bytes) -> JsonValue:
    if isinstance(s, bytes):
        s = s.decode("utf-8")
    return cast(JsonValue, json.loads(s))


def canonical_dumps(obj: Any) -> str:
    """
    Deterministic serialization used for cache keys.

    Object keys are sorted; values JSON cannot represent become an opaque
    ``"<TypeName>"`` token.
    """
    return json.dumps(
        obj,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
        default=_opaque_token,
    )


def _opaque_token(obj: Any) -> str:
    if isinstance(obj, (set, frozenset)):
        return canonical_dumps(sorted(obj, key=canonical_dumps))
    return f"<{type(obj).__name__}>"


async def resolve_maybe_awaitable(value: Awaitable[T] | T) -> T:
    """Await ``value`` when it is awaitable, else return it unchanged."""
    if inspect.isawaitable(value):
        return await cast(Awaitable[T], value)
    return cast(T, value)
