"""Runtimes for properties and events."""

from decoy.runtime.interceptor import Interceptor
from decoy.runtime.options import DoubleOptions
from decoy.runtime.tracking import args_type


class PropertyInterceptor:
    """Getter/setter pair with a backing value.

    When no behavior is registered, ``set`` stores into ``value`` and ``get``
    returns it. ``reset`` clears tracking but keeps the stored value.
    """

    def __init__(self, name: str, *, options: DoubleOptions, default, writable: bool, contract=None):
        self.name = name
        self.value = default()
        self.getter = Interceptor(
            f"{name}.get", (), options=options, fallback=self._read, contract=contract
        )
        self.setter = None
        if writable:
            self.setter = Interceptor(
                f"{name}.set", ("value",),
                options=options, fallback=self._write, void=True, contract=contract,
            )

    def _read(self):
        return self.value

    def _write(self, value):
        self.value = value

    @property
    def writable(self) -> bool:
        return self.setter is not None

    def on_get(self, callback, times=None):
        return self.getter.register(callback, times)

    def on_set(self, callback, times=None):
        return self._require_setter().register(callback, times)

    def get(self):
        return self.getter.invoke()

    def set(self, value) -> None:
        self._require_setter().invoke(value)

    def _require_setter(self):
        if self.setter is None:
            raise AttributeError(f"{self.name} has no setter")
        return self.setter

    @property
    def get_count(self) -> int:
        return self.getter.call_count

    @property
    def set_count(self) -> int:
        return self.setter.call_count if self.setter else 0

    @property
    def call_count(self) -> int:
        return self.get_count + self.set_count

    @property
    def was_called(self) -> bool:
        return self.call_count > 0

    @property
    def last_set_value(self):
        return self.setter.last_arg if self.setter else None

    def failures(self):
        found = list(self.getter.failures())
        if self.setter is not None:
            found.extend(self.setter.failures())
        return found

    def verify(self) -> bool:
        return not self.failures()

    def reset(self) -> None:
        self.getter.reset()
        if self.setter is not None:
            self.setter.reset()


class EventInterceptor:
    """Subscription list for one event. Events carry no behaviors to verify."""

    def __init__(self, name: str, parameter_names=()):
        self.name = name
        self.parameter_names = tuple(parameter_names)
        self._args_tuple = args_type(name, self.parameter_names)
        self._handlers = []
        self.add_count = 0
        self.remove_count = 0
        self.raise_count = 0
        self.last_raise_args = None

    def add(self, handler) -> None:
        if not callable(handler):
            raise TypeError(f"{self.name}: handler must be callable, got {handler!r}")
        self.add_count += 1
        self._handlers.append(handler)

    def remove(self, handler) -> None:
        self.remove_count += 1
        if handler in self._handlers:
            # Most recent subscription first.
            index = len(self._handlers) - 1 - self._handlers[::-1].index(handler)
            del self._handlers[index]

    def raise_event(self, *args) -> None:
        if len(args) != len(self.parameter_names):
            raise TypeError(
                f"{self.name} is raised with {len(self.parameter_names)} arguments ({len(args)} given)"
            )
        self.raise_count += 1
        self.last_raise_args = self._args_tuple(*args)
        for handler in list(self._handlers):
            handler(*args)

    @property
    def handlers(self) -> tuple:
        return tuple(self._handlers)

    @property
    def has_subscribers(self) -> bool:
        return bool(self._handlers)

    @property
    def call_count(self) -> int:
        return self.raise_count

    @property
    def was_called(self) -> bool:
        return self.add_count + self.remove_count + self.raise_count > 0

    def failures(self):
        return []

    def verify(self) -> bool:
        return True

    def reset(self) -> None:
        self.add_count = 0
        self.remove_count = 0
        self.raise_count = 0
        self.last_raise_args = None

    def clear(self) -> None:
        self.reset()
        self._handlers.clear()
