"""Interceptor: the invocation state machine behind one member signature.

Behaviors are kept as an ordered sequence of ``(callback, times)`` entries with
a cursor. Each call is recorded against the entry under the cursor; once that
entry has handled its allotted calls the cursor moves on, and the call after
the last permitted repetition of the last entry raises ``SequenceExhausted``.
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from decoy.errors import MissingDefault, NotConfigured, RegistrationError, SequenceExhausted
from decoy.runtime.options import DoubleOptions
from decoy.runtime.times import Times
from decoy.runtime.tracking import Tracking, args_type
from decoy.runtime.verification import VerificationFailure

logger = structlog.get_logger()


class InterceptorState(Enum):
    UNCONFIGURED = "unconfigured"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class SequenceEntry:
    callback: object
    times: Times
    tracking: Tracking


class Sequence:
    """Handle returned by ``register(callback, times)``; extends the sequence with ``chain``."""

    def __init__(self, interceptor, bare=False):
        self._interceptor = interceptor
        self.bare = bare

    def chain(self, callback, times: Times) -> "Sequence":
        if self._interceptor._sequence is not self:
            raise RegistrationError(
                f"{self._interceptor.name}: this sequence was replaced by a later registration"
            )
        self._interceptor.chain(callback, times)
        return self

    @property
    def entries(self) -> tuple[SequenceEntry, ...]:
        return self._interceptor.entries

    @property
    def tracking(self) -> Tracking:
        """Tracking of the most recently added entry."""
        return self._interceptor.entries[-1].tracking

    @property
    def total_call_count(self) -> int:
        return sum(entry.tracking.call_count for entry in self.entries)

    def verify(self) -> bool:
        return all(entry.times.verify(entry.tracking.call_count) for entry in self.entries)

    def reset(self) -> None:
        self._interceptor.reset()


class Interceptor:
    def __init__(
        self,
        name: str,
        parameter_names=(),
        *,
        options: DoubleOptions | None = None,
        default=None,
        fallback=None,
        void: bool = False,
        contract: str | None = None,
    ):
        self.name = name
        self.contract = contract
        self.parameter_names = tuple(parameter_names)
        self._options = options if options is not None else DoubleOptions()
        self._default = default
        self._fallback = fallback
        self._void = void
        self._args_tuple = args_type(name, self.parameter_names)
        self._entries: list[SequenceEntry] = []
        self._sequence: Sequence | None = None
        self._expectations: list[Times] = []
        self._cursor = 0
        self._unconfigured_count = 0
        self._last_args = None

    # -- registration -------------------------------------------------------

    def register(self, callback, times: Times | None = None):
        """Start a new sequence.

        Without ``times`` the callback handles every call and its ``Tracking``
        is returned. With ``times`` a ``Sequence`` handle is returned so more
        entries can be chained.
        """
        if not callable(callback):
            raise RegistrationError(f"{self.name}: callback must be callable, got {callback!r}")
        bare = times is None
        if bare:
            times = Times.forever()
        self._check_sequencing_policy(times)
        entry = SequenceEntry(callback, times, Tracking(self._args_tuple))
        self._entries = [entry]
        self._cursor = 0
        self._sequence = Sequence(self, bare=bare)
        return entry.tracking if bare else self._sequence

    def chain(self, callback, times: Times) -> Sequence:
        if not self._entries:
            raise RegistrationError(f"{self.name}: nothing registered to chain onto")
        if self._sequence.bare:
            raise RegistrationError(
                f"{self.name}: the sequence was started without a repeat policy; "
                "pass times to register() to build a sequence"
            )
        if not callable(callback):
            raise RegistrationError(f"{self.name}: callback must be callable, got {callback!r}")
        self._check_sequencing_policy(times)
        if self._entries[-1].times.is_forever:
            raise RegistrationError(
                f"{self.name}: the last entry repeats forever, so a chained entry is unreachable"
            )
        self._entries.append(SequenceEntry(callback, times, Tracking(self._args_tuple)))
        return self._sequence

    def expect(self, times: Times) -> None:
        """Add an expectation on the total call count, checked by ``verify``."""
        self._expectations.append(times)

    def _check_sequencing_policy(self, times):
        if times.is_verification:
            raise RegistrationError(
                f"{self.name}: {times} is a verification policy and cannot drive a sequence; "
                "use expect() instead"
            )

    # -- invocation ---------------------------------------------------------

    def invoke(self, *args):
        if len(args) != len(self.parameter_names):
            raise TypeError(
                f"{self.name}() takes {len(self.parameter_names)} "
                f"argument{'' if len(self.parameter_names) == 1 else 's'} ({len(args)} given)"
            )
        if not self._entries:
            return self._invoke_unconfigured(args)

        entry = self._entries[self._cursor]
        entry.tracking.record(args)
        self._last_args = entry.tracking.last_args
        times = entry.times
        if not times.is_forever and entry.tracking.call_count >= times.count:
            if self._cursor < len(self._entries) - 1:
                self._cursor += 1
            elif entry.tracking.call_count > times.count:
                attempted = self._sequence_call_count
                logger.debug("sequence_exhausted", interceptor=self.name, call_index=attempted)
                raise SequenceExhausted(self.name, attempted)

        result = entry.callback(*args)
        return None if self._void else result

    __call__ = invoke

    def _invoke_unconfigured(self, args):
        self._unconfigured_count += 1
        self._last_args = self._args_tuple(*args)
        if self._options.strict:
            logger.debug("strict_miss", interceptor=self.name)
            raise NotConfigured(self.name, self.contract)
        if self._fallback is not None:
            result = self._fallback(*args)
            return None if self._void else result
        if self._void:
            return None
        if self._default is None:
            raise MissingDefault(self.name)
        return self._default()

    # -- state --------------------------------------------------------------

    @property
    def entries(self) -> tuple[SequenceEntry, ...]:
        return tuple(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_configured(self) -> bool:
        return bool(self._entries)

    @property
    def state(self) -> InterceptorState:
        if not self._entries:
            return InterceptorState.UNCONFIGURED
        last = self._entries[-1]
        if (
            self._cursor == len(self._entries) - 1
            and not last.times.is_forever
            and last.tracking.call_count >= last.times.count
        ):
            return InterceptorState.EXHAUSTED
        return InterceptorState.ACTIVE

    @property
    def unconfigured_call_count(self) -> int:
        return self._unconfigured_count

    @property
    def call_count(self) -> int:
        return self._unconfigured_count + self._sequence_call_count

    @property
    def _sequence_call_count(self) -> int:
        return sum(e.tracking.call_count for e in self._entries)

    @property
    def was_called(self) -> bool:
        return self.call_count > 0

    @property
    def last_args(self):
        return self._last_args

    @property
    def last_arg(self):
        if self._last_args is None or len(self._last_args) != 1:
            return None
        return self._last_args[0]

    # -- verification -------------------------------------------------------

    def failures(self) -> list[VerificationFailure]:
        found = []
        for position, entry in enumerate(self._entries):
            actual = entry.tracking.call_count
            if not entry.times.verify(actual):
                label = self.name if len(self._entries) == 1 else f"{self.name} (entry {position + 1})"
                found.append(VerificationFailure(label, entry.times, actual))
        for times in self._expectations:
            if not times.verify(self.call_count):
                found.append(VerificationFailure(self.name, times, self.call_count))
        return found

    def verify(self) -> bool:
        return not self.failures()

    def reset(self) -> None:
        for entry in self._entries:
            entry.tracking.reset()
        self._cursor = 0
        self._unconfigured_count = 0
        self._last_args = None

    def __repr__(self):
        return f"Interceptor({self.name!r}, state={self.state.value}, calls={self.call_count})"
