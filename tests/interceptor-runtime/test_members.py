"""Tests for property and event runtimes."""

import pytest

from decoy.errors import NotConfigured
from decoy.runtime.members import EventInterceptor, PropertyInterceptor
from decoy.runtime.options import DoubleOptions
from decoy.runtime.times import Times


def prop(writable=True, strict=False):
    return PropertyInterceptor("Name", options=DoubleOptions(strict=strict), default=lambda: "", writable=writable)


class TestPropertyInterceptor:

    def test_initial_value_is_default(self):
        assert prop().get() == ""

    def test_set_stores_into_backing_value(self):
        name = prop()

        name.set("Ada")

        assert name.get() == "Ada"
        assert name.value == "Ada"
        assert name.last_set_value == "Ada"
        assert name.get_count == 1
        assert name.set_count == 1

    def test_on_get_overrides_backing(self):
        name = prop()
        name.set("stored")
        name.on_get(lambda: "configured")

        assert name.get() == "configured"

    def test_on_set_skips_backing(self):
        name = prop()
        seen = []
        name.on_set(seen.append)

        name.set("x")

        assert seen == ["x"]
        assert name.value == ""

    def test_read_only(self):
        name = prop(writable=False)

        with pytest.raises(AttributeError, match="no setter"):
            name.set("x")
        assert name.set_count == 0

    def test_reset_keeps_value(self):
        name = prop()
        name.set("kept")
        name.get()

        name.reset()

        assert name.get_count == 0
        assert name.set_count == 0
        assert name.last_set_value is None
        assert name.value == "kept"

    def test_strict_get_raises(self):
        with pytest.raises(NotConfigured):
            prop(strict=True).get()

    def test_getter_sequence_is_verified(self):
        name = prop()
        name.on_get(lambda: "a", Times.once())

        [failure] = name.failures()
        assert failure.identity == "Name.get"
        assert failure.actual == 0


class TestEventInterceptor:

    def test_raise_calls_handlers_in_order(self):
        changed = EventInterceptor("Changed", ("sender", "value"))
        calls = []
        changed.add(lambda sender, value: calls.append(("first", value)))
        changed.add(lambda sender, value: calls.append(("second", value)))

        changed.raise_event(None, 5)

        assert calls == [("first", 5), ("second", 5)]
        assert changed.raise_count == 1
        assert changed.last_raise_args.value == 5

    def test_add_and_remove_are_counted(self):
        changed = EventInterceptor("Changed")

        def handler():
            pass

        changed.add(handler)
        assert changed.has_subscribers
        changed.remove(handler)

        assert not changed.has_subscribers
        assert changed.add_count == 1
        assert changed.remove_count == 1

    def test_remove_drops_most_recent_subscription(self):
        changed = EventInterceptor("Changed")

        def first():
            pass

        def second():
            pass

        changed.add(first)
        changed.add(second)
        changed.add(first)
        changed.remove(first)

        assert changed.handlers == (first, second)

    def test_removing_unknown_handler_is_counted_only(self):
        changed = EventInterceptor("Changed")

        changed.remove(print)

        assert changed.remove_count == 1

    def test_raise_without_subscribers(self):
        changed = EventInterceptor("Changed", ("value",))

        changed.raise_event(1)

        assert changed.raise_count == 1

    def test_reset_keeps_handlers(self):
        changed = EventInterceptor("Changed")
        changed.add(lambda: None)
        changed.raise_event()

        changed.reset()

        assert changed.raise_count == 0
        assert changed.add_count == 0
        assert changed.has_subscribers

    def test_clear_drops_handlers(self):
        changed = EventInterceptor("Changed")
        changed.add(lambda: None)

        changed.clear()

        assert not changed.has_subscribers

    def test_never_fails_verification(self):
        assert EventInterceptor("Changed").verify()

    def test_wrong_argument_count(self):
        with pytest.raises(TypeError):
            EventInterceptor("Changed", ("value",)).raise_event()
