"""Signal channel stored in the page under test."""

import logging
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from wasm_test_bridge.channels.base import SignalChannel
from wasm_test_bridge.channels.scripts import (
    MAILBOX_SCRIPT,
    SIGNAL_GLOBAL,
    legacy_dom_script,
)
from wasm_test_bridge.errors import ProtocolViolationError
from wasm_test_bridge.models.outcome import Outcome

log = logging.getLogger(__name__)

_SIGNAL = f"window.{SIGNAL_GLOBAL}"


@dataclass(frozen=True, kw_only=True)
class PageSignalChannel(SignalChannel):
    """Signal channel backed by the ``window.__wasmTestSignal`` mailbox.

    The mailbox must be installed with ``install`` before the page is loaded.
    Waiting is delegated to ``page.wait_for_function`` so the page notifies the
    runner instead of the runner issuing one round trip per poll.
    """

    page: Page = field(repr=False)
    poll_interval: float = 0.1

    @classmethod
    async def install(
        cls,
        page: Page,
        *,
        poll_interval: float = 0.1,
        legacy_dom: tuple[str, str] | None = None,
    ) -> "PageSignalChannel":
        """Register the mailbox init script on a page that is not loaded yet.

        Args:
            page: Fresh page the test document will be loaded into
            poll_interval: Seconds between in-page checks while waiting
            legacy_dom: Busy indicator and success checkbox selectors for
                pages that signal completion through the DOM

        """
        await page.add_init_script(script=MAILBOX_SCRIPT)
        if legacy_dom is not None:
            busy_selector, success_selector = legacy_dom
            log.debug(
                "Installing legacy DOM adapter: busy=%s success=%s",
                busy_selector,
                success_selector,
            )
            await page.add_init_script(
                script=legacy_dom_script(busy_selector, success_selector)
            )
        return cls(page=page, poll_interval=poll_interval)

    async def reset(self) -> None:
        epoch = await self.page.evaluate(f"() => {_SIGNAL}.reset()")
        log.debug("Signal channel reset to epoch %s", epoch)

    async def write(self, outcome: Outcome, *, epoch: int | None = None) -> None:
        result = await self.page.evaluate(
            f"([outcome, epoch]) => {_SIGNAL}.write(outcome, epoch)",
            [outcome.to_signal(), epoch],
        )
        if result == "violation":
            raise ProtocolViolationError(
                "Outcome already written for the current epoch and not consumed"
            )
        if result == "stale":
            log.debug("Discarded stale outcome for epoch %s", epoch)

    async def peek(self) -> Outcome | None:
        return self._to_outcome(await self.page.evaluate(f"() => {_SIGNAL}.peek()"))

    async def consume(self) -> Outcome | None:
        return self._to_outcome(await self.page.evaluate(f"() => {_SIGNAL}.consume()"))

    async def wait_for_outcome(self, timeout: float) -> Outcome | None:
        if timeout <= 0:
            return await self.peek()
        try:
            await self.page.wait_for_function(
                f"() => {_SIGNAL}.pending()",
                timeout=timeout * 1000,
                polling=max(self.poll_interval * 1000, 1),
            )
        except PlaywrightTimeoutError:
            return None
        return await self.peek()

    @staticmethod
    def _to_outcome(snapshot: dict[str, Any]) -> Outcome | None:
        if violation := snapshot.get("violation"):
            raise ProtocolViolationError(violation)
        slot = snapshot.get("slot")
        if slot is None:
            return None
        return Outcome.from_signal(slot)
