"""Exceptions raised by the harness.

Every structural error carries the ``reason`` string that ends up in a
``Failure`` outcome, so callers can tell a misconfigured suite apart from a
computation that failed or hung.
"""

REASON_NOT_FOUND = "NotFound"
REASON_AMBIGUOUS = "Ambiguous"
REASON_NOT_ACTIVATABLE = "NotActivatable"
REASON_TIMEOUT = "timeout"


class HarnessError(Exception):
    """Base class for all harness errors."""

    reason: str = "error"


class ConfigurationError(HarnessError):
    """Raised when the suite or the page is set up incorrectly."""

    reason = "configuration"


class TriggerNotFoundError(ConfigurationError):
    """Raised when no page control is bound to a test identifier."""

    reason = REASON_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(f"No trigger found for test identifier '{identifier}'")
        self.identifier = identifier


class AmbiguousTriggerError(ConfigurationError):
    """Raised when more than one page control is bound to a test identifier."""

    reason = REASON_AMBIGUOUS

    def __init__(self, identifier: str, count: int) -> None:
        super().__init__(
            f"{count} triggers found for test identifier '{identifier}', expected 1"
        )
        self.identifier = identifier
        self.count = count


class NotActivatableError(ConfigurationError):
    """Raised when the control bound to a test identifier cannot be activated."""

    reason = REASON_NOT_ACTIVATABLE

    def __init__(self, identifier: str, detail: str) -> None:
        super().__init__(
            f"Trigger for test identifier '{identifier}' cannot be activated: {detail}"
        )
        self.identifier = identifier


class SignalTimeoutError(HarnessError, TimeoutError):
    """Raised when no outcome was signalled within the allotted window."""

    reason = REASON_TIMEOUT


class ComputationError(HarnessError):
    """Raised when the computation under test reported a failure."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ProtocolViolationError(HarnessError):
    """Raised when an unconsumed outcome is overwritten.

    This means two runs overlapped on the same signal channel and is fatal.
    """

    reason = "protocol violation"
