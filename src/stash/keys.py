"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic cache keys for API calls and function calls.

Keys are plain string concatenations (no hashing), so identical call
descriptions always map to the same key and keys stay human readable::

    api:{url}:{sorted query string}:{canonical body}
    func:{function name}:{canonical argument list}
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias
from urllib.parse import urlencode

from .utils import canonical_dumps

API_NAMESPACE = "api"
FUNCTION_NAMESPACE = "func"
ANONYMOUS_FUNCTION_NAME = "anonymous"

QueryParams: TypeAlias = Mapping[str, Any] | Iterable[tuple[str, Any]]


def canonical_query(params: QueryParams | None) -> str:
    """
    URL-encode ``params`` in a fixed order (by key, then by value).

    Insertion order never affects the output, so equivalent parameter sets
    built different ways serialize identically.
    """
    if not params:
        return ""
    pairs = params.items() if isinstance(params, Mapping) else params
    normalized = [(str(k), _query_value(v)) for k, v in pairs]
    return urlencode(sorted(normalized))


def _query_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return canonical_dumps(value)


def api_cache_key(
    url: str,
    params: QueryParams | None = None,
    body: Any = None,
) -> str:
    """Build the cache key for an API call."""
    body_part = "" if body is None else canonical_dumps(body)
    return f"{API_NAMESPACE}:{url}:{canonical_query(params)}:{body_part}"


def function_cache_key(
    name: str,
    args: Iterable[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> str:
    """
    Build the cache key for a function call.

    Keyword arguments, when present, are appended to the argument list as
    one object with sorted keys.
    """
    payload: list[Any] = list(args)
    if kwargs:
        payload.append(dict(kwargs))
    return f"{FUNCTION_NAMESPACE}:{name}:{canonical_dumps(payload)}"


def function_name(fn: Callable[..., Any]) -> str:
    """
    Identify ``fn`` for key derivation.

    Lambdas, partials and other nameless callables all map to
    ``"anonymous"`` and therefore share keys under the same prefix. Pass a
    distinct key prefix when wrapping more than one of them.
    """
    if isinstance(fn, functools.partial):
        return ANONYMOUS_FUNCTION_NAME
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    if not name or name.endswith("<lambda>"):
        return ANONYMOUS_FUNCTION_NAME
    return str(name)


@dataclass(frozen=True, slots=True)
class ApiCall:
    """Description of one API request for key derivation."""

    url: str
    params: QueryParams | None = None
    body: Any = None

    def cache_key(self) -> str:
        return api_cache_key(self.url, self.params, self.body)


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """Description of one function invocation for key derivation."""

    name: str
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)

    def cache_key(self) -> str:
        return function_cache_key(self.name, self.args, self.kwargs)


CallDescription: TypeAlias = ApiCall | FunctionCall
