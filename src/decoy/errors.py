"""Error taxonomy for member resolution and interceptor runtimes."""


class DecoyError(Exception):
    """Base class for every error raised by decoy."""


class ConfigurationConflict(DecoyError):
    """Two contracts declare the same method signature, so a flat call site is ambiguous.

    Raised (or collected) at resolution time. The identity for the member is
    never wired.
    """

    def __init__(self, member_name, contracts, signature, reason=None):
        self.member_name = member_name
        self.contracts = tuple(contracts)
        self.signature = tuple(signature)
        self.reason = reason or "declared by more than one contract"
        self.all_conflicts = [self]
        shown = ", ".join(self.signature) if self.signature else ""
        super().__init__(
            f"{member_name}({shown}) {self.reason}: {', '.join(self.contracts)}"
        )


class NotConfigured(DecoyError):
    """A strict double received a call for a member with nothing registered."""

    def __init__(self, identity, contract=None):
        self.identity = identity
        self.contract = contract
        qualified = f"{contract}.{identity}" if contract else identity
        super().__init__(
            f"{qualified} invocation failed with strict behavior. "
            "Register a callback before invoking."
        )


class SequenceExhausted(DecoyError):
    """A call arrived after the last permitted repetition of the last entry."""

    def __init__(self, identity, call_index):
        self.identity = identity
        self.call_index = call_index
        super().__init__(
            f"Callback sequence exhausted for '{identity}' on call {call_index}. "
            "All registered callbacks have been used the specified number of times."
        )


class VerificationFailed(DecoyError):
    """Explicit verification found unsatisfied repeat policies."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [
            f"  {f.identity}: expected {f.expected}, actual {f.actual} "
            f"call{'' if f.actual == 1 else 's'}"
            for f in self.failures
        ]
        super().__init__("Verification failed:\n" + "\n".join(lines))


class RegistrationError(DecoyError, ValueError):
    """A behavior registration that could never take effect."""


class MissingDefault(DecoyError):
    """An unconfigured member has no safe default value to return."""

    def __init__(self, identity):
        self.identity = identity
        super().__init__(
            f"No implementation provided for {identity}. Register a callback."
        )
