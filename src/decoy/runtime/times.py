"""Times: how many consecutive calls a behavior handles, or what verification expects."""

from dataclasses import dataclass
from enum import Enum


class _Mode(Enum):
    EXACTLY = "exactly"
    FOREVER = "forever"
    AT_LEAST = "at least"
    AT_MOST = "at most"


@dataclass(frozen=True)
class Times:
    count: int
    mode: _Mode = _Mode.EXACTLY

    @classmethod
    def once(cls) -> "Times":
        return cls(1)

    @classmethod
    def twice(cls) -> "Times":
        return cls(2)

    @classmethod
    def exactly(cls, count: int) -> "Times":
        if count < 1:
            raise ValueError(f"Times.exactly needs a positive count, got {count}")
        return cls(count)

    @classmethod
    def forever(cls) -> "Times":
        return cls(0, _Mode.FOREVER)

    @classmethod
    def at_least(cls, count: int) -> "Times":
        if count < 0:
            raise ValueError(f"Times.at_least needs a non-negative count, got {count}")
        return cls(count, _Mode.AT_LEAST)

    @classmethod
    def at_most(cls, count: int) -> "Times":
        if count < 0:
            raise ValueError(f"Times.at_most needs a non-negative count, got {count}")
        return cls(count, _Mode.AT_MOST)

    @classmethod
    def never(cls) -> "Times":
        return cls(0, _Mode.EXACTLY)

    @property
    def is_forever(self) -> bool:
        return self.mode is _Mode.FOREVER

    @property
    def is_verification(self) -> bool:
        """True for policies that only make sense when checking counts afterwards."""
        return self.mode in (_Mode.AT_LEAST, _Mode.AT_MOST) or (
            self.mode is _Mode.EXACTLY and self.count == 0
        )

    def verify(self, actual: int) -> bool:
        if self.mode is _Mode.FOREVER:
            return True
        if self.mode is _Mode.AT_LEAST:
            return actual >= self.count
        if self.mode is _Mode.AT_MOST:
            return actual <= self.count
        return actual == self.count

    def __str__(self) -> str:
        if self.is_forever:
            return "any number of calls"
        if self.mode is _Mode.EXACTLY and self.count == 0:
            return "never"
        plural = "" if self.count == 1 else "s"
        return f"{self.mode.value} {self.count} call{plural}"
