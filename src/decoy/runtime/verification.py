from collections import namedtuple

from decoy.errors import VerificationFailed

VerificationFailure = namedtuple("VerificationFailure", ["identity", "expected", "actual"])


class VerificationResult:
    """Outcome of walking every runtime of a double. Never raises on its own."""

    def __init__(self, failures):
        self.failures = list(failures)

    @property
    def passed(self) -> bool:
        return not self.failures

    def __bool__(self):
        return self.passed

    def raise_for_failures(self) -> None:
        if self.failures:
            raise VerificationFailed(self.failures)

    def __repr__(self):
        return f"VerificationResult(passed={self.passed}, failures={self.failures!r})"
