"""Models for test run outcomes."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Literal, TypeAlias

from wasm_test_bridge.errors import (
    REASON_AMBIGUOUS,
    REASON_NOT_ACTIVATABLE,
    REASON_NOT_FOUND,
    REASON_TIMEOUT,
    ComputationError,
    ConfigurationError,
    SignalTimeoutError,
)

OutcomeStatus: TypeAlias = Literal["success", "failure"]
FailureKind: TypeAlias = Literal["configuration", "timeout", "computation"]

CONFIGURATION_REASONS = frozenset(
    {REASON_NOT_FOUND, REASON_AMBIGUOUS, REASON_NOT_ACTIVATABLE}
)


@dataclass(frozen=True, kw_only=True)
class Outcome:
    """Terminal result of a single bridge run.

    A success may carry an optional result value. A failure always carries a
    reason; the structural reasons are ``NotFound``, ``Ambiguous``,
    ``NotActivatable`` and ``timeout``, anything else was reported by the
    computation itself.
    """

    status: OutcomeStatus
    reason: str | None = None
    value: Any = None
    duration: float = 0.0

    def __post_init__(self) -> None:
        if self.status == "success" and self.reason is not None:
            raise ValueError("A successful outcome cannot carry a failure reason")
        if self.status == "failure" and not self.reason:
            raise ValueError("A failed outcome requires a reason")

    @classmethod
    def success(cls, value: Any = None, *, duration: float = 0.0) -> "Outcome":
        """Create a successful outcome."""
        return cls(status="success", value=value, duration=duration)

    @classmethod
    def failure(cls, reason: str, *, duration: float = 0.0) -> "Outcome":
        """Create a failed outcome."""
        return cls(status="failure", reason=reason, duration=duration)

    @classmethod
    def from_signal(cls, payload: Mapping[str, Any]) -> "Outcome":
        """Build an outcome from the JSON object written by the page.

        Raises:
            ValueError: If the payload is not a recognised outcome

        """
        status = payload.get("status")
        if status == "success":
            return cls.success(payload.get("value"))
        if status == "failure":
            reason = payload.get("reason") or "computation failed without a reason"
            return cls.failure(str(reason))
        raise ValueError(f"Unrecognised outcome signal: {dict(payload)!r}")

    def to_signal(self) -> dict[str, Any]:
        """Serialize to the JSON object shape the page writes."""
        if self.status == "success":
            return {"status": "success", "value": self.value}
        return {"status": "failure", "reason": self.reason}

    def with_duration(self, duration: float) -> "Outcome":
        """Return a copy with the given duration in seconds."""
        return replace(self, duration=duration)

    @property
    def ok(self) -> bool:
        """Whether the run succeeded."""
        return self.status == "success"

    @property
    def kind(self) -> FailureKind | None:
        """Classify a failure; ``None`` for a success."""
        if self.ok:
            return None
        if self.reason in CONFIGURATION_REASONS:
            return "configuration"
        if self.reason == REASON_TIMEOUT:
            return "timeout"
        return "computation"

    def raise_for_failure(self) -> None:
        """Raise the harness error matching this outcome, if it failed."""
        match self.kind:
            case None:
                return
            case "configuration":
                raise ConfigurationError(self.reason)
            case "timeout":
                raise SignalTimeoutError(self.reason)
            case _:
                raise ComputationError(self.reason or "")
