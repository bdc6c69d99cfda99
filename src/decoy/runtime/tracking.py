"""Tracking: call history for one registered behavior."""

import re
from collections import namedtuple
from keyword import iskeyword


def args_type(name: str, parameter_names):
    """Named tuple whose fields are the member's parameter names."""
    fields = [
        p if p.isidentifier() and not iskeyword(p) and not p.startswith("_") else f"arg{i}"
        for i, p in enumerate(parameter_names)
    ]
    typename = re.sub(r"\W", "_", name)
    return namedtuple(f"{typename}Args", fields, rename=True)


class Tracking:
    def __init__(self, args_tuple):
        self._args_tuple = args_tuple
        self.call_count = 0
        self.last_args = None

    @property
    def was_called(self) -> bool:
        return self.call_count > 0

    @property
    def last_arg(self):
        """The argument of a single-parameter member; None otherwise."""
        if self.last_args is None or len(self.last_args) != 1:
            return None
        return self.last_args[0]

    def record(self, args) -> None:
        self.call_count += 1
        self.last_args = self._args_tuple(*args)

    def reset(self) -> None:
        self.call_count = 0
        self.last_args = None

    def __repr__(self):
        return f"Tracking(call_count={self.call_count}, last_args={self.last_args!r})"
