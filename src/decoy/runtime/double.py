"""The double instance: wires one runtime per resolved identity and aggregates them."""

import re

import structlog

from decoy.members.defaults import default_factory
from decoy.members.identity import IdentityShape, InterceptorIdentity
from decoy.members.resolver import MemberResolver
from decoy.members.signature import MemberKind
from decoy.runtime.generic import GenericDispatcher, key_name
from decoy.runtime.indexer import IndexerDispatcher
from decoy.runtime.interceptor import Interceptor
from decoy.runtime.members import EventInterceptor, PropertyInterceptor
from decoy.runtime.options import DoubleOptions
from decoy.runtime.overloads import OverloadedInterceptor
from decoy.runtime.verification import VerificationResult

logger = structlog.get_logger()

__all__ = ["Double", "DoubleOptions", "wire"]

# Return types spelled like a type parameter (T, TResult) take the type argument's default.
_TYPE_PARAMETER = re.compile(r"^T([A-Z]\w*)?$")


def wire(identity: InterceptorIdentity, options: DoubleOptions):
    """Build the runtime for one identity, chosen by its kind and shape."""
    contract = identity.contracts[0] if identity.contracts else None
    kind, shape = identity.kind, identity.shape

    if kind is MemberKind.METHOD:
        if shape is IdentityShape.PLAIN:
            return _method(identity.name, identity.slots[0], options, contract)
        if shape is IdentityShape.OVERLOAD_GROUP:
            return OverloadedInterceptor(identity.name, {
                slot.key: _method(f"{identity.name}({slot.key})", slot, options, contract)
                for slot in identity.slots
            })
        if shape is IdentityShape.GENERIC_METHOD:
            return _generic(identity, options, contract)
    elif kind is MemberKind.PROPERTY:
        signature = identity.slots[0].signature
        return PropertyInterceptor(
            identity.name,
            options=options,
            default=default_factory(signature.return_type, MemberKind.PROPERTY),
            writable=signature.writable,
            contract=contract,
        )
    elif kind is MemberKind.INDEXER:
        return IndexerDispatcher(identity.name, identity.slots, options, contract)
    elif kind is MemberKind.EVENT:
        return EventInterceptor(identity.name, identity.slots[0].signature.parameter_names)
    raise ValueError(f"{identity.name}: no runtime for {kind.value} with shape {shape.value}")


def _method(name, slot, options, contract, default=None):
    signature = slot.signature
    return Interceptor(
        name,
        signature.parameter_names,
        options=options,
        default=default or default_factory(signature.return_type),
        void=signature.is_void,
        contract=contract,
    )


def _generic(identity, options, contract):
    def create(key):
        arity = len(key) if isinstance(key, tuple) else 1
        slots = [s for s in identity.slots if s.signature.generic_arity == arity]
        name = f"{identity.name}[{key_name(key)}]"
        if len(slots) == 1:
            return _method(name, slots[0], options, contract, _instantiated_default(slots[0], key))
        return OverloadedInterceptor(name, {
            slot.key: _method(f"{name}({slot.key})", slot, options, contract,
                              _instantiated_default(slot, key))
            for slot in slots
        }, generic_arity=arity)

    arities = [slot.signature.generic_arity for slot in identity.slots]
    return GenericDispatcher(identity.name, arities, create)


def _instantiated_default(slot, key):
    return_type = slot.signature.return_type
    if isinstance(key, tuple) or return_type is None or not _TYPE_PARAMETER.match(return_type):
        return None
    return default_factory(key_name(key), MemberKind.PROPERTY)


class Double:
    """A test double: one runtime per interceptor identity, reachable by name."""

    def __init__(self, identities, options: DoubleOptions | None = None):
        self._options = options if options is not None else DoubleOptions()
        self._identities = {identity.name: identity for identity in identities}
        self._runtimes = {
            name: wire(identity, self._options) for name, identity in self._identities.items()
        }
        logger.debug("double_wired", runtimes=len(self._runtimes), strict=self._options.strict)

    @classmethod
    def from_members(cls, members, *, strict: bool = False, reserved_names=()) -> "Double":
        """Resolve ``members`` and wire the result.

        Raises ``ConfigurationConflict`` when any member is ambiguous. Names
        the double itself uses are reserved so no runtime is hidden behind them.
        """
        reserved = list(reserved_names) + sorted(_DOUBLE_API)
        resolution = MemberResolver(reserved).resolve(members)
        resolution.raise_for_conflicts()
        return cls(resolution.identities, DoubleOptions(strict=strict))

    def __getattr__(self, name):
        runtimes = self.__dict__.get("_runtimes", {})
        if name in runtimes:
            return runtimes[name]
        raise AttributeError(f"{type(self).__name__} has no member {name!r}")

    def __getitem__(self, name: str):
        return self._runtimes[name]

    def __contains__(self, name):
        return name in self._runtimes

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._runtimes)

    def identity(self, name: str) -> InterceptorIdentity:
        return self._identities[name]

    @property
    def options(self) -> DoubleOptions:
        return self._options

    @property
    def strict(self) -> bool:
        return self._options.strict

    @strict.setter
    def strict(self, value: bool) -> None:
        self._options.strict = value

    def make_strict(self) -> "Double":
        self._options.strict = True
        return self

    def verify(self) -> VerificationResult:
        failures = []
        for runtime in self._runtimes.values():
            failures.extend(runtime.failures())
        return VerificationResult(failures)

    def verify_all(self) -> None:
        self.verify().raise_for_failures()

    def reset(self) -> None:
        for runtime in self._runtimes.values():
            runtime.reset()

    def __repr__(self):
        return f"Double({', '.join(self._runtimes)})"


_DOUBLE_API = {name for name in vars(Double) if not name.startswith("_")}
