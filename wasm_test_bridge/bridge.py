"""Completion bridge: run one test in the page and wait for its outcome."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum

from wasm_test_bridge.channels.base import SignalChannel
from wasm_test_bridge.dispatchers.base import TriggerDispatcher
from wasm_test_bridge.errors import REASON_TIMEOUT, ConfigurationError
from wasm_test_bridge.models.outcome import Outcome

log = logging.getLogger(__name__)


class RunState(StrEnum):
    """States of a single bridge run."""

    IDLE = "idle"
    DISPATCHED = "dispatched"
    WAITING = "waiting"
    RESOLVED = "resolved"


@dataclass(frozen=True, kw_only=True)
class CompletionBridge:
    """Composes a trigger dispatcher and a signal channel.

    A bridge owns its channel for the duration of a run; concurrent runs on
    the same bridge are serialized.
    """

    dispatcher: TriggerDispatcher
    channel: SignalChannel
    _lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False, compare=False
    )

    async def run(self, identifier: str, timeout_ms: int) -> Outcome:
        """Run the test bound to the identifier and return its outcome.

        Args:
            identifier: Test identifier bound to exactly one page trigger
            timeout_ms: Maximum wait time for the outcome in milliseconds

        Returns:
            Success or failure; structural failures use the reasons
            ``NotFound``, ``Ambiguous``, ``NotActivatable`` and ``timeout``

        Raises:
            ConfigurationError: If the timeout is not strictly positive
            ProtocolViolationError: If the channel was written twice

        """
        if timeout_ms <= 0:
            raise ConfigurationError(
                f"Timeout must be strictly positive, got {timeout_ms} ms"
            )

        async with self._lock:
            return await self._run(identifier, timeout_ms / 1000)

    async def _run(self, identifier: str, timeout: float) -> Outcome:
        loop = asyncio.get_running_loop()
        started = loop.time()
        self._transition(identifier, RunState.IDLE)

        await self.channel.reset()

        try:
            await self.dispatcher.activate(identifier)
        except ConfigurationError as exc:
            log.error("Cannot dispatch %s: %s", identifier, exc)
            self._transition(identifier, RunState.RESOLVED)
            return Outcome.failure(exc.reason, duration=loop.time() - started)
        self._transition(identifier, RunState.DISPATCHED)

        self._transition(identifier, RunState.WAITING)
        observed = await self.channel.wait_for_outcome(timeout)
        duration = loop.time() - started
        self._transition(identifier, RunState.RESOLVED)

        if observed is None:
            log.warning(
                "Test %s did not signal completion within %.1fs, abandoning run",
                identifier,
                timeout,
            )
            return Outcome.failure(REASON_TIMEOUT, duration=duration)

        outcome = await self.channel.consume() or observed
        log.info(
            "Test %s resolved: status=%s duration=%.1fs",
            identifier,
            outcome.status,
            duration,
        )
        return outcome.with_duration(duration)

    @staticmethod
    def _transition(identifier: str, state: RunState) -> None:
        log.debug("Run %s -> %s", identifier, state)
