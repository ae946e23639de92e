from __future__ import annotations

import functools

from stash import (
    ApiCall,
    FunctionCall,
    api_cache_key,
    canonical_query,
    function_cache_key,
    function_name,
)


def fibonacci(n: int) -> int:
    return n if n <= 1 else fibonacci(n - 1) + fibonacci(n - 2)


class Repo:
    def load(self, item_id: int) -> dict:
        return {"id": item_id}


def test_api_key_ignores_param_insertion_order():
    first = api_cache_key("/posts", {"userId": 1, "page": 2, "q": "a b"}, {"x": 1})
    second = api_cache_key("/posts", {"q": "a b", "page": 2, "userId": 1}, {"x": 1})
    assert first == second
    assert first == 'api:/posts:page=2&q=a+b&userId=1:{"x":1}'


def test_api_key_for_posts_scenario():
    assert api_cache_key("/posts", {"userId": 1}) == "api:/posts:userId=1:"


def test_api_key_without_params_or_body_keeps_separators():
    assert api_cache_key("https://example.com/items") == "api:https://example.com/items::"
    assert api_cache_key("/items", {}, None) == "api:/items::"


def test_api_key_body_serialization_is_canonical():
    first = api_cache_key("/search", body={"b": [1, 2], "a": {"z": 1, "y": None}})
    second = api_cache_key("/search", body={"a": {"y": None, "z": 1}, "b": [1, 2]})
    assert first == second
    assert first.endswith(':{"a":{"y":null,"z":1},"b":[1,2]}')


def test_empty_body_differs_from_missing_body():
    assert api_cache_key("/x", body={}) == "api:/x::{}"
    assert api_cache_key("/x", body={}) != api_cache_key("/x")


def test_canonical_query_sorts_pairs_and_normalizes_values():
    assert canonical_query([("b", "2"), ("a", "1"), ("a", "0")]) == "a=0&a=1&b=2"
    assert canonical_query({"flag": True, "empty": None}) == "empty=&flag=true"
    assert canonical_query(None) == ""


def test_function_key_serializes_argument_list():
    assert function_cache_key("fibonacci", [10]) == "func:fibonacci:[10]"
    assert function_cache_key("noargs", ()) == "func:noargs:[]"


def test_function_key_appends_sorted_kwargs():
    key = function_cache_key("load", (1,), {"b": 2, "a": "x"})
    assert key == 'func:load:[1,{"a":"x","b":2}]'
    assert key == function_cache_key("load", (1,), {"a": "x", "b": 2})


def test_unserializable_arguments_become_opaque_tokens():
    key = function_cache_key("apply", [print, 3])
    assert key == 'func:apply:["<builtin_function_or_method>",3]'
    assert function_cache_key("apply", [len, 3]) == key


def test_function_name_uses_qualified_name():
    assert function_name(fibonacci) == "fibonacci"
    assert function_name(Repo().load) == "Repo.load"


def test_nameless_callables_normalize_to_anonymous():
    assert function_name(lambda: 1) == "anonymous"
    assert function_name(functools.partial(fibonacci, 3)) == "anonymous"


def test_call_descriptions_delegate_to_key_functions():
    assert ApiCall("/posts", {"userId": 1}).cache_key() == "api:/posts:userId=1:"
    assert FunctionCall("fibonacci", (10,)).cache_key() == "func:fibonacci:[10]"
    assert FunctionCall("f", (1,), {"k": 2}).cache_key() == 'func:f:[1,{"k":2}]'
