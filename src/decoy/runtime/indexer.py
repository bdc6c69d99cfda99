"""Indexer dispatch: one get/set runtime pair per declared key type."""

from decoy.members.defaults import default_factory
from decoy.members.identity import SignatureSlot
from decoy.members.signature import MemberKind, type_suffix
from decoy.runtime.interceptor import Interceptor
from decoy.runtime.options import DoubleOptions


def indexer_key(key_types) -> str:
    """Slot key for the given key types; matches the resolver's indexer keys."""
    parts = []
    for key_type in key_types:
        if isinstance(key_type, str):
            parts.append(type_suffix(key_type))
        else:
            parts.append(type_suffix(key_type.__name__))
    return "_".join(parts)


class IndexerAccessor:
    """Getter and optional setter for one key type, over a backing dictionary.

    Unconfigured non-strict reads come from ``backing`` (falling back to the
    value type's default) and unconfigured non-strict writes store into it.
    """

    def __init__(self, name: str, slot: SignatureSlot, options: DoubleOptions, contract=None):
        self.name = name
        self.key_type = slot.key
        self.backing = {}
        self._value_default = default_factory(slot.signature.return_type, MemberKind.INDEXER)
        self.getter = Interceptor(
            f"{name}.get", ("key",), options=options, fallback=self._read, contract=contract
        )
        self.setter = None
        if slot.signature.writable:
            self.setter = Interceptor(
                f"{name}.set", ("key", "value"),
                options=options, fallback=self._write, void=True, contract=contract,
            )

    def _read(self, key):
        if key in self.backing:
            return self.backing[key]
        return self._value_default()

    def _write(self, key, value):
        self.backing[key] = value

    @property
    def writable(self) -> bool:
        return self.setter is not None

    def on_get(self, callback, times=None):
        return self.getter.register(callback, times)

    def on_set(self, callback, times=None):
        return self._require_setter().register(callback, times)

    def get(self, key):
        return self.getter.invoke(key)

    def set(self, key, value) -> None:
        self._require_setter().invoke(key, value)

    def _require_setter(self):
        if self.setter is None:
            raise AttributeError(f"{self.name} is read-only")
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
    def last_get_key(self):
        return self.getter.last_arg

    @property
    def last_set_entry(self):
        """``(key, value)`` of the most recent write, or None."""
        if self.setter is None or self.setter.last_args is None:
            return None
        return tuple(self.setter.last_args)

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


class IndexerDispatcher:
    def __init__(self, name: str, slots, options: DoubleOptions, contract=None):
        self.name = name
        self._accessors = {
            slot.key: IndexerAccessor(f"{name}[{slot.key}]", slot, options, contract)
            for slot in slots
        }

    @property
    def key_types(self) -> tuple[str, ...]:
        return tuple(self._accessors)

    def for_key_type(self, *key_types) -> IndexerAccessor:
        key = indexer_key(key_types)
        try:
            return self._accessors[key]
        except KeyError:
            raise KeyError(
                f"{self.name} has no {key!r} key type; declared: {', '.join(self._accessors)}"
            ) from None

    def __getitem__(self, key_type) -> IndexerAccessor:
        if not isinstance(key_type, tuple):
            key_type = (key_type,)
        return self.for_key_type(*key_type)

    def _route(self, key, key_type):
        if key_type is None:
            key_type = tuple(type(k) for k in key) if isinstance(key, tuple) else type(key)
        return self[key_type]

    def get(self, key, key_type=None):
        return self._route(key, key_type).get(key)

    def set(self, key, value, key_type=None) -> None:
        self._route(key, key_type).set(key, value)

    @property
    def call_count(self) -> int:
        return sum(a.call_count for a in self._accessors.values())

    @property
    def was_called(self) -> bool:
        return self.call_count > 0

    def accessors(self):
        return self._accessors.items()

    def failures(self):
        found = []
        for accessor in self._accessors.values():
            found.extend(accessor.failures())
        return found

    def verify(self) -> bool:
        return not self.failures()

    def reset(self) -> None:
        for accessor in self._accessors.values():
            accessor.reset()
