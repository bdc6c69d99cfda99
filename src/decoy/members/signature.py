"""MemberSignature: one abstract member as described by the metadata extractor."""

import re
from dataclasses import dataclass, field
from enum import Enum


class MemberKind(Enum):
    METHOD = "method"
    PROPERTY = "property"
    INDEXER = "indexer"
    EVENT = "event"

    @property
    def overloadable(self) -> bool:
        """Methods are the only kind whose call shape varies per signature."""
        return self is MemberKind.METHOD


_QUALIFIERS = ("global::", "System.", "builtins.", "typing.", "collections.abc.")

_ALIASES = {
    "int": "Int32",
    "Int32": "Int32",
    "str": "String",
    "string": "String",
    "String": "String",
    "bool": "Boolean",
    "boolean": "Boolean",
    "Boolean": "Boolean",
    "long": "Int64",
    "Int64": "Int64",
    "short": "Int16",
    "Int16": "Int16",
    "byte": "Byte",
    "sbyte": "SByte",
    "uint": "UInt32",
    "ulong": "UInt64",
    "ushort": "UInt16",
    "double": "Double",
    "decimal": "Decimal",
    "char": "Char",
    "object": "Object",
    "bytes": "Bytes",
    "void": "void",
}

_TOKEN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_VOID = {None, "", "void", "None", "NoneType"}


def type_suffix(descriptor: str) -> str:
    """Friendly, language-neutral spelling of a type descriptor.

    ``"global::System.Int32"`` and ``"int"`` both give ``"Int32"``;
    ``"list[str]"`` gives ``"List_String"``.
    """
    text = descriptor.strip().rstrip("?")
    for qualifier in _QUALIFIERS:
        text = text.replace(qualifier, "")
    tokens = _TOKEN_RE.findall(text)
    if not tokens:
        raise ValueError(f"not a type descriptor: {descriptor!r}")
    return "_".join(_alias(token) for token in tokens)


def _alias(token: str) -> str:
    if token in _ALIASES:
        return _ALIASES[token]
    return token[0].upper() + token[1:]


def signature_key(parameter_types, generic_arity: int = 0) -> str:
    """Deterministic per-signature key derived from the ordered parameter types."""
    if parameter_types:
        key = "_".join(type_suffix(t) for t in parameter_types)
    else:
        key = "NoParams"
    if generic_arity:
        key += f"_T{generic_arity}"
    return key


def is_void(return_type) -> bool:
    return return_type in _VOID


@dataclass(frozen=True)
class MemberSignature:
    kind: MemberKind
    name: str
    contract: str
    parameter_types: tuple[str, ...] = ()
    return_type: str | None = None
    generic_arity: int = 0
    parameter_names: tuple[str, ...] = field(default=())
    writable: bool = False

    def __post_init__(self):
        if not self.name:
            raise ValueError("member name must not be empty")
        if self.generic_arity < 0:
            raise ValueError(f"{self.name}: generic arity must not be negative")
        object.__setattr__(self, "parameter_types", tuple(self.parameter_types))
        names = tuple(self.parameter_names) or tuple(
            f"arg{i}" for i in range(len(self.parameter_types))
        )
        if len(names) != len(self.parameter_types):
            raise ValueError(
                f"{self.name}: {len(names)} parameter names for "
                f"{len(self.parameter_types)} parameter types"
            )
        object.__setattr__(self, "parameter_names", names)
        if self.kind is MemberKind.INDEXER and not self.parameter_types:
            raise ValueError(f"{self.name}: an indexer needs at least one key type")

    @property
    def is_generic(self) -> bool:
        return self.generic_arity > 0

    @property
    def is_void(self) -> bool:
        return is_void(self.return_type)

    @property
    def partition_key(self) -> tuple:
        """What makes two declarations the same member.

        Methods are matched on ordered parameter types plus generic arity.
        The other kinds have a single call shape, so their value type is part
        of the match, and every type is compared by its friendly spelling.
        """
        if self.kind is MemberKind.METHOD:
            return (self.parameter_types, self.generic_arity)
        value_type = None if is_void(self.return_type) else type_suffix(self.return_type)
        return (tuple(type_suffix(t) for t in self.parameter_types), value_type)

    @property
    def key(self) -> str:
        return signature_key(self.parameter_types, self.generic_arity)

    def display(self) -> str:
        params = ", ".join(self.parameter_types)
        generic = f"<{self.generic_arity}>" if self.generic_arity else ""
        if self.kind is MemberKind.INDEXER:
            return f"{self.contract}[{params}]"
        if self.kind is MemberKind.METHOD:
            return f"{self.contract}.{self.name}{generic}({params})"
        return f"{self.contract}.{self.name}"
