"""Fixtures for integration tests against a real headless Chromium."""

from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any

import pytest
from playwright.async_api import Error as PlaywrightError

from wasm_test_bridge.browser import BrowserSession
from wasm_test_bridge.config import HarnessConfig

PAGES_DIR = Path(__file__).parent / "pages"


async def _launch(
    stack: AsyncExitStack, **overrides: Any
) -> BrowserSession:
    config = HarnessConfig(
        serve_dir=PAGES_DIR,
        ready_expression="window.pageReady === true",
        ready_timeout_ms=10_000,
        poll_interval_ms=20,
        **overrides,
    )
    try:
        return await stack.enter_async_context(BrowserSession.from_config(config))
    except PlaywrightError as exc:
        await stack.aclose()
        pytest.skip(f"Unable to launch Chromium: {exc}")


@pytest.fixture
async def session() -> AsyncGenerator[BrowserSession, None]:
    """Browser session serving the mailbox fixture page."""
    async with AsyncExitStack() as stack:
        yield await _launch(stack)


@pytest.fixture
async def legacy_session() -> AsyncGenerator[BrowserSession, None]:
    """Browser session serving the DOM-signalling fixture page."""
    async with AsyncExitStack() as stack:
        yield await _launch(
            stack,
            page_url="legacy.html",
            legacy_dom_signal={"busy_selector": "#loader", "success_selector": "#testSuccess"},
        )


@pytest.fixture
async def legacy_startup_session() -> AsyncGenerator[BrowserSession, None]:
    """Browser session serving a DOM-signalling page with a start-up loader."""
    async with AsyncExitStack() as stack:
        yield await _launch(
            stack,
            page_url="legacy-startup.html",
            legacy_dom_signal={"busy_selector": "#loader", "success_selector": "#testSuccess"},
        )
