"""Abstract base class for signal channels."""

import asyncio
from abc import ABC, abstractmethod

from wasm_test_bridge.models.outcome import Outcome


class SignalChannel(ABC):
    """Single-slot mailbox carrying one outcome from the page to the runner.

    The page side is the only writer and the runner the only reader. Every
    cycle starts with ``reset``, which bumps the channel epoch; writers that
    captured an older epoch are ignored so an abandoned computation can never
    leak its outcome into a later run.
    """

    poll_interval: float = 0.1

    @abstractmethod
    async def reset(self) -> None:
        """Clear any prior outcome and start a new cycle.

        Calling this on an empty channel is a no-op apart from the new cycle.
        """

    @abstractmethod
    async def write(self, outcome: Outcome, *, epoch: int | None = None) -> None:
        """Store the outcome of the current cycle.

        Args:
            outcome: Terminal outcome of the computation
            epoch: Cycle the writer was bound to; stale epochs are discarded

        Raises:
            ProtocolViolationError: If an unconsumed outcome is already stored

        """

    @abstractmethod
    async def peek(self) -> Outcome | None:
        """Return the stored outcome without consuming it, or None if empty."""

    @abstractmethod
    async def consume(self) -> Outcome | None:
        """Return the stored outcome and leave the channel empty."""

    async def wait_for_outcome(self, timeout: float) -> Outcome | None:
        """Wait until an outcome is stored.

        Args:
            timeout: Maximum wait time in seconds

        Returns:
            The stored outcome, or None if the timeout elapsed first

        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            if (outcome := await self.peek()) is not None:
                return outcome

            remaining = deadline - loop.time()
            if remaining <= 0:
                return None

            await asyncio.sleep(min(self.poll_interval, remaining))
