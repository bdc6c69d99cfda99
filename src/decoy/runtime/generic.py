"""Generic type-key dispatch: one independent runtime per generic instantiation."""

from decoy.members.signature import type_suffix


def type_key(type_arg):
    """Dictionary key for one type argument.

    Descriptor strings and builtin types collapse to their friendly suffix, so
    ``int`` and ``"System.Int32"`` select the same runtime. Other types are
    used as-is.
    """
    if isinstance(type_arg, str):
        return type_suffix(type_arg)
    if isinstance(type_arg, type) and type_arg.__module__ == "builtins":
        return type_suffix(type_arg.__name__)
    return type_arg


def key_name(key) -> str:
    """Readable spelling of a type key, used in runtime names."""
    if isinstance(key, tuple):
        return ", ".join(key_name(k) for k in key)
    if isinstance(key, type):
        return key.__name__
    return str(key)


class GenericDispatcher:
    """Lazily creates one runtime per type key through ``factory(key)``.

    ``generic_arity`` is an int, or several ints when same-named generic
    methods differ in their number of type parameters.
    """

    def __init__(self, name: str, generic_arity, factory):
        arities = (generic_arity,) if isinstance(generic_arity, int) else tuple(sorted(set(generic_arity)))
        if not arities or min(arities) < 1:
            raise ValueError(f"{name}: a generic dispatcher needs arity of at least 1")
        self.name = name
        self.arities = arities
        self._factory = factory
        self._runtimes = {}

    @property
    def generic_arity(self) -> int:
        return self.arities[0]

    def for_type(self, *type_args):
        """Runtime for these type arguments, created on first use and then reused."""
        if len(type_args) not in self.arities:
            expected = " or ".join(str(a) for a in self.arities)
            raise TypeError(
                f"{self.name} takes {expected} type argument"
                f"{'' if self.arities == (1,) else 's'} ({len(type_args)} given)"
            )
        keys = tuple(type_key(t) for t in type_args)
        key = keys[0] if len(keys) == 1 else keys
        runtime = self._runtimes.get(key)
        if runtime is None:
            runtime = self._runtimes[key] = self._factory(key)
        return runtime

    def __getitem__(self, type_args):
        if not isinstance(type_args, tuple):
            type_args = (type_args,)
        return self.for_type(*type_args)

    def invoke(self, type_args, *args):
        return self[type_args].invoke(*args)

    @property
    def instantiated_types(self) -> tuple:
        return tuple(self._runtimes)

    def runtimes(self):
        return self._runtimes.items()

    @property
    def total_call_count(self) -> int:
        return sum(runtime.call_count for runtime in self._runtimes.values())

    call_count = total_call_count

    @property
    def was_called(self) -> bool:
        return self.total_call_count > 0

    def failures(self):
        found = []
        for runtime in self._runtimes.values():
            found.extend(runtime.failures())
        return found

    def verify(self) -> bool:
        return not self.failures()

    def reset(self) -> None:
        for runtime in self._runtimes.values():
            runtime.reset()
