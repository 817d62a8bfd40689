"""In-process signal channel."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeAlias

from wasm_test_bridge.channels.base import SignalChannel
from wasm_test_bridge.errors import ProtocolViolationError
from wasm_test_bridge.models.outcome import Outcome

log = logging.getLogger(__name__)

SignalWriter: TypeAlias = Callable[[Outcome], Awaitable[None]]


@dataclass(kw_only=True)
class InMemorySignalChannel(SignalChannel):
    """Signal channel holding its slot in process memory.

    Readers are woken through an ``asyncio.Event`` instead of polling.
    """

    poll_interval: float = 0.1
    _slot: Outcome | None = field(default=None, init=False, repr=False)
    _epoch: int = field(default=0, init=False)
    _written: asyncio.Event = field(default_factory=asyncio.Event, init=False, repr=False)

    @property
    def epoch(self) -> int:
        """Current cycle number."""
        return self._epoch

    def writer(self) -> SignalWriter:
        """Return a writer bound to the current cycle."""
        epoch = self._epoch

        async def _write(outcome: Outcome) -> None:
            await self.write(outcome, epoch=epoch)

        return _write

    async def reset(self) -> None:
        if self._slot is not None:
            log.debug("Discarding unconsumed outcome from epoch %d", self._epoch)
        self._epoch += 1
        self._slot = None
        self._written.clear()

    async def write(self, outcome: Outcome, *, epoch: int | None = None) -> None:
        if epoch is not None and epoch != self._epoch:
            log.debug(
                "Discarding stale outcome from epoch %d (current epoch %d)",
                epoch,
                self._epoch,
            )
            return

        if self._slot is not None:
            raise ProtocolViolationError(
                f"Outcome already written for epoch {self._epoch} and not consumed"
            )

        self._slot = outcome
        self._written.set()

    async def peek(self) -> Outcome | None:
        return self._slot

    async def consume(self) -> Outcome | None:
        outcome, self._slot = self._slot, None
        self._written.clear()
        return outcome

    async def wait_for_outcome(self, timeout: float) -> Outcome | None:
        try:
            async with asyncio.timeout(timeout):
                await self._written.wait()
        except TimeoutError:
            return None
        return self._slot
