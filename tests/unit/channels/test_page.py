"""Tests for the page-backed signal channel."""

from unittest.mock import AsyncMock, Mock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from wasm_test_bridge.channels.page import PageSignalChannel
from wasm_test_bridge.channels.scripts import MAILBOX_SCRIPT
from wasm_test_bridge.errors import ProtocolViolationError
from wasm_test_bridge.models.outcome import Outcome


@pytest.fixture
def page() -> Mock:
    """Create a mock Playwright page."""
    page = Mock()
    page.add_init_script = AsyncMock()
    page.evaluate = AsyncMock()
    page.wait_for_function = AsyncMock()
    return page


@pytest.fixture
def channel(page: Mock) -> PageSignalChannel:
    """Create a channel over the mock page."""
    return PageSignalChannel(page=page, poll_interval=0.05)


class TestInstall:
    """Tests for PageSignalChannel.install."""

    async def test_installs_mailbox(self, page: Mock) -> None:
        """Registers the mailbox script only."""
        channel = await PageSignalChannel.install(page, poll_interval=0.2)

        page.add_init_script.assert_awaited_once_with(script=MAILBOX_SCRIPT)
        assert channel.poll_interval == 0.2

    async def test_installs_legacy_adapter(self, page: Mock) -> None:
        """Registers the DOM adapter after the mailbox when requested."""
        await PageSignalChannel.install(page, legacy_dom=("#loader", "#testSuccess"))

        assert page.add_init_script.await_count == 2
        adapter = page.add_init_script.await_args_list[1].kwargs["script"]
        assert '"busySelector": "#loader"' in adapter
        assert '"successSelector": "#testSuccess"' in adapter


class TestReads:
    """Tests for peek and consume."""

    async def test_peek_empty(self, channel: PageSignalChannel, page: Mock) -> None:
        """Returns None when the slot is empty."""
        page.evaluate.return_value = {"epoch": 1, "slot": None, "violation": None}

        assert await channel.peek() is None

    async def test_peek_success(self, channel: PageSignalChannel, page: Mock) -> None:
        """Converts the stored success into an Outcome."""
        page.evaluate.return_value = {
            "epoch": 1,
            "slot": {"status": "success", "value": {"bits": 256}},
            "violation": None,
        }

        assert await channel.peek() == Outcome.success({"bits": 256})

    async def test_consume_failure(self, channel: PageSignalChannel, page: Mock) -> None:
        """Converts the stored failure into an Outcome."""
        page.evaluate.return_value = {
            "epoch": 3,
            "slot": {"status": "failure", "reason": "invalid proof"},
            "violation": None,
        }

        assert await channel.consume() == Outcome.failure("invalid proof")
        assert "consume()" in page.evaluate.await_args.args[0]

    async def test_violation_raises(
        self, channel: PageSignalChannel, page: Mock
    ) -> None:
        """Raises when the page recorded a double write."""
        page.evaluate.return_value = {
            "epoch": 1,
            "slot": {"status": "success", "value": None},
            "violation": "Outcome already written for epoch 1 and not consumed",
        }

        with pytest.raises(ProtocolViolationError, match="already written"):
            await channel.peek()


class TestWrite:
    """Tests for write."""

    async def test_passes_outcome_and_epoch(
        self, channel: PageSignalChannel, page: Mock
    ) -> None:
        """Sends the serialized outcome with its epoch to the page."""
        page.evaluate.return_value = "written"

        await channel.write(Outcome.failure("bad key"), epoch=4)

        assert page.evaluate.await_args.args[1] == [
            {"status": "failure", "reason": "bad key"},
            4,
        ]

    async def test_violation_raises(
        self, channel: PageSignalChannel, page: Mock
    ) -> None:
        """Raises when the page refuses to overwrite an outcome."""
        page.evaluate.return_value = "violation"

        with pytest.raises(ProtocolViolationError):
            await channel.write(Outcome.success())

    async def test_stale_write_is_ignored(
        self, channel: PageSignalChannel, page: Mock
    ) -> None:
        """A stale epoch is not an error."""
        page.evaluate.return_value = "stale"

        await channel.write(Outcome.success(), epoch=1)


class TestWaitForOutcome:
    """Tests for wait_for_outcome."""

    async def test_returns_outcome_when_pending(
        self, channel: PageSignalChannel, page: Mock
    ) -> None:
        """Waits in the page, then reads the outcome."""
        page.evaluate.return_value = {
            "epoch": 1,
            "slot": {"status": "success", "value": None},
            "violation": None,
        }

        outcome = await channel.wait_for_outcome(timeout=2.5)

        assert outcome == Outcome.success()
        kwargs = page.wait_for_function.await_args.kwargs
        assert kwargs["timeout"] == 2500
        assert kwargs["polling"] == 50

    async def test_returns_none_on_playwright_timeout(
        self, channel: PageSignalChannel, page: Mock
    ) -> None:
        """Maps Playwright's timeout to an empty result."""
        page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout exceeded")

        assert await channel.wait_for_outcome(timeout=0.1) is None
        page.evaluate.assert_not_awaited()
