"""In-process trigger registry."""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from wasm_test_bridge.channels.memory import InMemorySignalChannel
from wasm_test_bridge.dispatchers.base import TriggerDispatcher
from wasm_test_bridge.errors import AmbiguousTriggerError, TriggerNotFoundError
from wasm_test_bridge.models.outcome import Outcome

log = logging.getLogger(__name__)

Computation: TypeAlias = Callable[[], Awaitable[Any]]


@dataclass(kw_only=True)
class RegistryTriggerDispatcher(TriggerDispatcher):
    """Dispatcher over computations registered in the current process.

    Activating an identifier schedules its computation as a task. When the
    computation returns, a success carrying the return value is written to
    the channel; when it raises, a failure carrying the exception message is.
    The writer is bound to the channel epoch at activation time.
    """

    channel: InMemorySignalChannel
    _triggers: dict[str, list[Computation]] = field(
        default_factory=lambda: defaultdict(list), init=False, repr=False
    )
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False, repr=False)

    def register(self, identifier: str, computation: Computation) -> None:
        """Bind a computation to an identifier."""
        self._triggers[identifier].append(computation)

    def trigger(self, identifier: str) -> Callable[[Computation], Computation]:
        """Decorator form of ``register``."""

        def _decorator(computation: Computation) -> Computation:
            self.register(identifier, computation)
            return computation

        return _decorator

    async def activate(self, identifier: str) -> None:
        bound = self._triggers.get(identifier, [])
        if not bound:
            raise TriggerNotFoundError(identifier)
        if len(bound) > 1:
            raise AmbiguousTriggerError(identifier, len(bound))

        write = self.channel.writer()
        task = asyncio.create_task(
            self._execute(identifier, bound[0], write), name=f"trigger:{identifier}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def aclose(self) -> None:
        """Cancel computations that are still running."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _execute(
        self,
        identifier: str,
        computation: Computation,
        write: Callable[[Outcome], Awaitable[None]],
    ) -> None:
        try:
            value = await computation()
        except Exception as exc:
            log.info("Computation %s failed: %s", identifier, exc)
            await write(Outcome.failure(str(exc) or type(exc).__name__))
            return
        await write(Outcome.success(value))
