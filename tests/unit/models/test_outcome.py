"""Tests for the Outcome model."""

import pytest

from wasm_test_bridge.errors import (
    ComputationError,
    ConfigurationError,
    SignalTimeoutError,
)
from wasm_test_bridge.models.outcome import Outcome


class TestConstruction:
    """Tests for Outcome invariants."""

    def test_success_rejects_reason(self) -> None:
        """A success cannot carry a failure reason."""
        with pytest.raises(ValueError, match="cannot carry"):
            Outcome(status="success", reason="NotFound")

    def test_failure_requires_reason(self) -> None:
        """A failure must say why."""
        with pytest.raises(ValueError, match="requires a reason"):
            Outcome(status="failure")

    def test_with_duration(self) -> None:
        """Returns a copy with the duration replaced."""
        outcome = Outcome.success("v").with_duration(1.5)

        assert outcome == Outcome(status="success", value="v", duration=1.5)


class TestKind:
    """Tests for failure classification."""

    @pytest.mark.parametrize(
        ("outcome", "kind"),
        [
            (Outcome.success(), None),
            (Outcome.failure("NotFound"), "configuration"),
            (Outcome.failure("Ambiguous"), "configuration"),
            (Outcome.failure("NotActivatable"), "configuration"),
            (Outcome.failure("timeout"), "timeout"),
            (Outcome.failure("proof rejected"), "computation"),
        ],
    )
    def test_kind(self, outcome: Outcome, kind: str | None) -> None:
        """Distinguishes misconfiguration, hangs and genuine failures."""
        assert outcome.kind == kind

    @pytest.mark.parametrize(
        ("outcome", "error"),
        [
            (Outcome.failure("NotFound"), ConfigurationError),
            (Outcome.failure("timeout"), SignalTimeoutError),
            (Outcome.failure("proof rejected"), ComputationError),
        ],
    )
    def test_raise_for_failure(self, outcome: Outcome, error: type[Exception]) -> None:
        """Raises the exception matching the failure kind."""
        with pytest.raises(error):
            outcome.raise_for_failure()

    def test_timeout_error_is_builtin_timeout(self) -> None:
        """Timeouts can be caught as the builtin TimeoutError."""
        with pytest.raises(TimeoutError):
            Outcome.failure("timeout").raise_for_failure()

    def test_success_does_not_raise(self) -> None:
        """Success is a no-op."""
        Outcome.success().raise_for_failure()


class TestSignal:
    """Tests for conversion from and to page signals."""

    def test_from_success_signal(self) -> None:
        """Reads the optional result value."""
        assert Outcome.from_signal({"status": "success", "value": 3}) == Outcome.success(3)

    def test_from_failure_signal_without_reason(self) -> None:
        """Substitutes a reason when the page omitted one."""
        outcome = Outcome.from_signal({"status": "failure"})

        assert outcome.reason == "computation failed without a reason"

    def test_from_unknown_signal(self) -> None:
        """Rejects payloads that are neither success nor failure."""
        with pytest.raises(ValueError, match="Unrecognised outcome signal"):
            Outcome.from_signal({"status": "pending"})

    def test_to_signal(self) -> None:
        """Serializes to the page's JSON shape."""
        assert Outcome.failure("bad").to_signal() == {
            "status": "failure",
            "reason": "bad",
        }
