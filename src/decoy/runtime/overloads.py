from decoy.members.signature import signature_key
from decoy.runtime.interceptor import Interceptor


class OverloadedInterceptor:
    """One identity serving several signatures, each with its own ``Interceptor``."""

    def __init__(self, name: str, interceptors: dict[str, Interceptor], generic_arity: int = 0):
        self.name = name
        self.generic_arity = generic_arity
        self._interceptors = dict(interceptors)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self._interceptors)

    def __getitem__(self, key: str) -> Interceptor:
        try:
            return self._interceptors[key]
        except KeyError:
            raise KeyError(
                f"{self.name} has no overload {key!r}; known: {', '.join(self._interceptors)}"
            ) from None

    def for_signature(self, *parameter_types) -> Interceptor:
        return self[signature_key(parameter_types, self.generic_arity)]

    def invoke(self, key: str, *args):
        return self[key].invoke(*args)

    def interceptors(self):
        return self._interceptors.items()

    @property
    def call_count(self) -> int:
        return sum(i.call_count for i in self._interceptors.values())

    @property
    def was_called(self) -> bool:
        return self.call_count > 0

    def failures(self):
        found = []
        for interceptor in self._interceptors.values():
            found.extend(interceptor.failures())
        return found

    def verify(self) -> bool:
        return not self.failures()

    def reset(self) -> None:
        for interceptor in self._interceptors.values():
            interceptor.reset()
