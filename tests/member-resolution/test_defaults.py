"""Tests for default values of unconfigured members."""

import asyncio
from decimal import Decimal

import pytest

from decoy.members.defaults import CompletedAwaitable, default_factory
from decoy.members.signature import MemberKind


class TestValueDefaults:

    @pytest.mark.parametrize("return_type, expected", [
        ("int", 0),
        ("long", 0),
        ("double", 0.0),
        ("float", 0.0),
        ("bool", False),
        ("string", ""),
        ("str", ""),
        ("bytes", b""),
    ])
    def test_zero_values(self, return_type, expected):
        assert default_factory(return_type)() == expected

    def test_decimal(self):
        assert default_factory("decimal")() == Decimal(0)

    @pytest.mark.parametrize("return_type", [None, "void", "int?", "Optional[int]", "Widget | None"])
    def test_void_and_nullable_give_none(self, return_type):
        assert default_factory(return_type)() is None


class TestCollectionDefaults:

    @pytest.mark.parametrize("return_type, expected", [
        ("List<int>", []),
        ("IEnumerable<string>", []),
        ("Sequence[str]", []),
        ("dict[str, int]", {}),
        ("IDictionary<string, int>", {}),
        ("set[int]", set()),
        ("tuple[int, int]", ()),
    ])
    def test_empty_instance(self, return_type, expected):
        assert default_factory(return_type)() == expected

    def test_fresh_instance_per_call(self):
        factory = default_factory("IList<int>")
        first = factory()
        first.append(1)
        assert factory() == []


class TestNoSafeDefault:

    def test_method_has_no_factory(self):
        assert default_factory("Widget") is None

    def test_property_falls_back_to_none(self):
        assert default_factory("Widget", MemberKind.PROPERTY)() is None

    def test_indexer_falls_back_to_none(self):
        assert default_factory("Widget", MemberKind.INDEXER)() is None


async def awaited(awaitable):
    return await awaitable


class TestAwaitableDefaults:

    @pytest.mark.parametrize("return_type", [
        "Task",
        "ValueTask",
        "System.Threading.Tasks.Task",
        "global::System.Threading.Tasks.ValueTask",
        "Awaitable[None]",
    ])
    def test_plain_awaitable_completes_with_none(self, return_type):
        result = default_factory(return_type)()

        assert isinstance(result, CompletedAwaitable)
        assert asyncio.run(awaited(result)) is None

    @pytest.mark.parametrize("return_type, expected", [
        ("Task<int>", 0),
        ("ValueTask<string>", ""),
        ("System.Threading.Tasks.Task<List<int>>", []),
        ("Awaitable[bool]", False),
        ("Coroutine[Any, Any, dict[str, int]]", {}),
        ("Task<string?>", None),
    ])
    def test_generic_awaitable_completes_with_inner_default(self, return_type, expected):
        result = default_factory(return_type)()

        assert asyncio.run(awaited(result)) == expected

    def test_can_be_awaited_more_than_once(self):
        result = default_factory("Task<int>")()

        assert asyncio.run(awaited(result)) == 0
        assert asyncio.run(awaited(result)) == 0

    def test_unknown_awaited_type_has_no_factory(self):
        assert default_factory("Task<Widget>") is None

    def test_similar_names_are_not_awaitable(self):
        assert default_factory("TaskList") is None
        assert default_factory("MyTask") is None
