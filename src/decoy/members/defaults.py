"""Static default values returned by unconfigured, non-strict members."""

import re
from decimal import Decimal

from decoy.members.signature import MemberKind, is_void, type_suffix

_ZEROS = {
    "Int32": 0,
    "Int64": 0,
    "Int16": 0,
    "Byte": 0,
    "SByte": 0,
    "UInt32": 0,
    "UInt64": 0,
    "UInt16": 0,
    "Float": 0.0,
    "Single": 0.0,
    "Double": 0.0,
    "Boolean": False,
    "Char": "\0",
    "String": "",
    "Bytes": b"",
}

_COLLECTIONS = {
    "List": list,
    "IList": list,
    "ICollection": list,
    "IEnumerable": list,
    "IReadOnlyList": list,
    "IReadOnlyCollection": list,
    "Sequence": list,
    "Iterable": list,
    "Collection": list,
    "Dict": dict,
    "Dictionary": dict,
    "IDictionary": dict,
    "IReadOnlyDictionary": dict,
    "Mapping": dict,
    "Set": set,
    "HashSet": set,
    "ISet": set,
    "AbstractSet": set,
    "Tuple": tuple,
}

# Task, ValueTask<int>, System.Threading.Tasks.Task, Awaitable[int], Coroutine[Any, Any, int]
_ASYNC_RE = re.compile(r"^(?:[\w.:]+[.:])?(Task|ValueTask|Awaitable|Coroutine)(?:\s*[<\[](.*)[>\]])?$")


class CompletedAwaitable:
    """An awaitable that is already finished; awaiting it gives ``value``."""

    def __init__(self, value=None):
        self.value = value

    def __await__(self):
        return self.value
        yield

    def __repr__(self):
        return f"CompletedAwaitable({self.value!r})"


def _none():
    return None


def default_factory(return_type, kind=MemberKind.METHOD):
    """Return a zero-argument callable producing the default for ``return_type``.

    Returns None when the type has no safe default and the member is a method.
    Properties and indexers of such types default to None instead.

    Awaitable return types produce a completed awaitable. The non-generic
    forms complete with None; the generic forms complete with the default
    of the awaited type, and have no factory when that type has none.
    """
    if is_void(return_type):
        return _none
    matched, awaited = _awaited_type(return_type)
    if matched:
        return _completed_factory(awaited, kind)
    if _is_nullable(return_type):
        return _none
    suffix = type_suffix(return_type)
    if suffix in _ZEROS:
        value = _ZEROS[suffix]
        return lambda: value
    if suffix == "Decimal":
        return lambda: Decimal(0)
    head = suffix.split("_", 1)[0]
    if head in _COLLECTIONS:
        return _COLLECTIONS[head]
    if kind is MemberKind.METHOD:
        return None
    return _none


def _completed_factory(awaited, kind):
    if awaited is None:
        return lambda: CompletedAwaitable()
    inner = default_factory(awaited, kind)
    if inner is None:
        return None
    return lambda: CompletedAwaitable(inner())


def _awaited_type(descriptor: str):
    """``(True, awaited type or None)`` for awaitable descriptors, else ``(False, None)``."""
    match = _ASYNC_RE.match(descriptor.strip().rstrip("?"))
    if match is None:
        return False, None
    arguments = match.group(2)
    if arguments is None or not arguments.strip():
        return True, None
    # Coroutine[Yield, Send, Return] awaits its last argument.
    return True, _split_arguments(arguments)[-1]


def _split_arguments(text: str) -> list[str]:
    parts, depth, start = [], 0, 0
    for position, char in enumerate(text):
        if char in "<[":
            depth += 1
        elif char in ">]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(text[start:position].strip())
            start = position + 1
    parts.append(text[start:].strip())
    return parts


def _is_nullable(descriptor: str) -> bool:
    text = descriptor.strip()
    return (
        text.endswith("?")
        or text.startswith(("Optional[", "typing.Optional["))
        or text.endswith("| None")
        or text.startswith("None |")
    )
