"""Tests for wiring resolved identities into a Double."""

import asyncio

import pytest

from decoy.errors import ConfigurationConflict, NotConfigured, VerificationFailed
from decoy.members.resolver import MemberResolver
from decoy.members.signature import MemberKind, MemberSignature
from decoy.runtime.double import Double, DoubleOptions, wire
from decoy.runtime.generic import GenericDispatcher
from decoy.runtime.indexer import IndexerDispatcher
from decoy.runtime.interceptor import Interceptor
from decoy.runtime.members import EventInterceptor, PropertyInterceptor
from decoy.runtime.overloads import OverloadedInterceptor
from decoy.runtime.times import Times


class Widget:
    pass


def method(name, *params, returns="void", arity=0, contract="IService", names=()):
    return MemberSignature(
        MemberKind.METHOD, name, contract, params, returns, generic_arity=arity, parameter_names=names
    )


async def awaited(awaitable):
    return await awaitable


SERVICE = [
    method("Add", "int", "int", returns="int", names=("a", "b")),
    method("Process", "int"),
    method("Process", "string"),
    method("Get", returns="T", arity=1),
    MemberSignature(MemberKind.PROPERTY, "Name", "IService", (), "string", writable=True),
    MemberSignature(MemberKind.INDEXER, "Item", "IService", ("int",), "string", writable=True),
    MemberSignature(MemberKind.EVENT, "Changed", "IService", ("value",)),
]


@pytest.fixture
def double():
    return Double.from_members(SERVICE)


class TestWiring:

    def test_runtime_per_kind_and_shape(self, double):
        assert isinstance(double.Add, Interceptor)
        assert isinstance(double.Process, OverloadedInterceptor)
        assert isinstance(double.Get, GenericDispatcher)
        assert isinstance(double.Name, PropertyInterceptor)
        assert isinstance(double.Indexer, IndexerDispatcher)
        assert isinstance(double.Changed, EventInterceptor)

    def test_names_in_resolution_order(self, double):
        assert double.names == ("Name", "Indexer", "Add", "Process", "Get", "Changed")

    def test_item_access(self, double):
        assert double["Add"] is double.Add
        assert "Add" in double
        assert double.identity("Add").member_name == "Add"

    def test_unknown_member(self, double):
        with pytest.raises(AttributeError, match="Remove"):
            double.Remove

    def test_wire_single_identity(self):
        [identity] = MemberResolver().resolve([method("Save")]).identities

        runtime = wire(identity, DoubleOptions())

        assert runtime.invoke() is None

    def test_conflicts_prevent_wiring(self):
        members = [method("Add", "int", contract="IFoo"), method("Add", "int", contract="IBar")]

        with pytest.raises(ConfigurationConflict):
            Double.from_members(members)

    def test_member_named_like_double_api_is_renamed(self):
        double = Double.from_members([method("reset"), method("verify")])

        assert double.names == ("reset2", "verify2")
        assert isinstance(double["reset2"], Interceptor)

    def test_reserved_names(self):
        double = Double.from_members([method("Save")], reserved_names=["Save"])

        assert double.names == ("Save2",)


class TestInvocation:

    def test_method(self, double):
        double.Add.register(lambda a, b: a + b)

        assert double.Add(2, 3) == 5
        assert double.Add.last_args.b == 3

    def test_unconfigured_method_returns_default(self, double):
        assert double.Add(1, 1) == 0

    def test_unconfigured_async_methods_complete(self):
        double = Double.from_members([
            method("SaveAsync", returns="Task"),
            method("CountAsync", returns="Task<int>"),
        ])

        assert asyncio.run(awaited(double.SaveAsync())) is None
        assert asyncio.run(awaited(double.CountAsync())) == 0

    def test_overloads(self, double):
        by_int = double.Process.for_signature("int").register(lambda value: None)

        double.Process.invoke("Int32", 1)
        double.Process.invoke("String", "x")

        assert by_int.call_count == 1
        assert double.Process.call_count == 2

    def test_generic_method_default_follows_type_argument(self, double):
        assert double.Get.for_type(int).invoke() == 0
        assert double.Get.for_type(str).invoke() == ""
        assert double.Get.for_type(Widget).invoke() is None

    def test_generic_instantiations_are_isolated(self, double):
        double.Get.for_type(int).register(lambda: 5)

        assert double.Get.invoke(int) == 5
        assert double.Get.invoke(str) == ""
        assert double.Get.for_type(int).call_count == 1

    def test_property(self, double):
        double.Name.set("Ada")

        assert double.Name.get() == "Ada"

    def test_indexer(self, double):
        double.Indexer.set(1, "one")

        assert double.Indexer.get(1) == "one"
        assert double.Indexer.get(2) == ""

    def test_event(self, double):
        seen = []
        double.Changed.add(seen.append)

        double.Changed.raise_event(3)

        assert seen == [3]


class TestGenericOverloads:

    def test_generic_with_several_signatures(self):
        double = Double.from_members([
            method("Convert", "int", returns="T", arity=1),
            method("Convert", "string", returns="T", arity=1),
        ])

        runtime = double.Convert.for_type(int)

        assert isinstance(runtime, OverloadedInterceptor)
        assert runtime.for_signature("int").invoke(1) == 0
        assert runtime.keys == ("Int32_T1", "String_T1")


class TestStrictness:

    def test_make_strict_applies_to_existing_runtimes(self, double):
        assert double.Add(1, 2) == 0

        double.make_strict()

        with pytest.raises(NotConfigured, match="IService.Add"):
            double.Add(1, 2)

    def test_strict_from_members(self):
        double = Double.from_members(SERVICE, strict=True)

        assert double.strict
        with pytest.raises(NotConfigured):
            double.Name.get()

    def test_strict_can_be_switched_off(self):
        double = Double.from_members(SERVICE, strict=True)
        double.strict = False

        assert double.Add(1, 2) == 0


class TestVerification:

    def test_aggregates_failures_across_runtimes(self, double):
        double.Add.register(lambda a, b: a + b, Times.once())
        double.Process.for_signature("int").register(lambda value: None, Times.twice())
        double.Add(1, 2)
        double.Process.invoke("Int32", 1)

        result = double.verify()

        assert not result
        [failure] = result.failures
        assert failure.identity == "Process(Int32)"
        assert failure.actual == 1

    def test_passes_when_all_policies_hold(self, double):
        double.Add.register(lambda a, b: a + b, Times.once())
        double.Add(1, 2)

        assert double.verify().passed

    def test_verify_all_raises(self, double):
        double.Name.on_get(lambda: "x", Times.once())

        with pytest.raises(VerificationFailed) as excinfo:
            double.verify_all()

        assert "Name.get: expected exactly 1 call, actual 0 calls" in str(excinfo.value)
        assert len(excinfo.value.failures) == 1

    def test_verification_never_raises_implicitly(self, double):
        double.Add.register(lambda a, b: a + b, Times.twice())
        double.Add(1, 2)

        double.reset()

    def test_reset_walks_every_runtime(self, double):
        double.Add(1, 2)
        double.Name.get()
        double.Get.invoke(int)
        double.Changed.raise_event(1)

        double.reset()

        assert double.Add.call_count == 0
        assert double.Name.get_count == 0
        assert double.Get.total_call_count == 0
        assert double.Changed.raise_count == 0
