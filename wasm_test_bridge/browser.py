"""Headless browser session providing one completion bridge per page."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from playwright.async_api import Browser, ConsoleMessage, Error, async_playwright
from yarl import URL

from wasm_test_bridge.bridge import CompletionBridge
from wasm_test_bridge.channels.page import PageSignalChannel
from wasm_test_bridge.config import HarnessConfig
from wasm_test_bridge.dispatchers.page import PageTriggerDispatcher
from wasm_test_bridge.server import serve_directory

log = logging.getLogger(__name__)

CHROMIUM_CANDIDATES = (
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
)


def find_chromium_executable(explicit: str | None = None) -> str | None:
    """Locate a system Chromium; None means use Playwright's bundled one."""
    for candidate in (explicit, os.getenv("CHROMIUM_PATH")):
        if candidate and Path(candidate).exists():
            return candidate

    for path in CHROMIUM_CANDIDATES:
        if Path(path).exists():
            return path
    return None


def launch_options(config: HarnessConfig) -> dict[str, Any]:
    """Build keyword arguments for ``chromium.launch``."""
    options: dict[str, Any] = {
        "headless": config.headless,
        "args": list(config.launch_args),
    }
    if executable := find_chromium_executable(config.chromium_path):
        options["executable_path"] = executable
    return options


def resolve_page_url(config: HarnessConfig, served: URL | None) -> str:
    """Combine the served base URL with a relative page_url, if any."""
    if served is None:
        if config.page_url is None:
            raise ValueError("page_url is required when no directory is served")
        return config.page_url
    if config.page_url:
        return str(served.join(URL(config.page_url)))
    return str(served)


def _forward_console(message: ConsoleMessage) -> None:
    level = logging.ERROR if message.type == "error" else logging.INFO
    log.log(level, "PAGE LOG: %s", message.text)


def _log_page_error(error: Error) -> None:
    log.error("PAGE ERROR: %s", error)


@dataclass(frozen=True, kw_only=True)
class BrowserSession:
    """A launched browser and the URL of the page under test."""

    config: HarnessConfig
    browser: Browser = field(repr=False)
    page_url: str

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: HarnessConfig
    ) -> AsyncGenerator["BrowserSession", None]:
        """Launch the browser, serving the page directory if configured."""
        async with AsyncExitStack() as stack:
            served: URL | None = None
            if config.serve_dir is not None:
                served = await stack.enter_async_context(
                    serve_directory(
                        config.serve_dir, config.serve_host, config.serve_port
                    )
                )

            playwright = await stack.enter_async_context(async_playwright())
            options = launch_options(config)
            log.info(
                "Launching Chromium: headless=%s executable=%s",
                config.headless,
                options.get("executable_path", "bundled"),
            )
            browser = await playwright.chromium.launch(**options)
            stack.push_async_callback(browser.close)

            yield cls(
                config=config,
                browser=browser,
                page_url=resolve_page_url(config, served),
            )

    @asynccontextmanager
    async def bridge(self) -> AsyncGenerator[CompletionBridge, None]:
        """Open a fresh page with the mailbox installed and yield its bridge."""
        context = await self.browser.new_context()
        try:
            page = await context.new_page()
            legacy = self.config.legacy_dom_signal
            channel = await PageSignalChannel.install(
                page,
                poll_interval=self.config.poll_interval,
                legacy_dom=(
                    (legacy.busy_selector, legacy.success_selector)
                    if legacy is not None
                    else None
                ),
            )
            if self.config.forward_console:
                page.on("console", _forward_console)
            page.on("pageerror", _log_page_error)

            log.info("Loading test page %s", self.page_url)
            await page.goto(self.page_url)
            if self.config.ready_expression:
                await page.wait_for_function(
                    self.config.ready_expression,
                    timeout=self.config.ready_timeout_ms,
                )
            if legacy is not None:
                # The busy indicator is shown while the page starts up too.
                log.debug("Waiting for %s to be hidden", legacy.busy_selector)
                await page.wait_for_selector(
                    legacy.busy_selector,
                    state="hidden",
                    timeout=self.config.ready_timeout_ms,
                )

            yield CompletionBridge(
                dispatcher=PageTriggerDispatcher(
                    page=page, selector_template=self.config.trigger_selector
                ),
                channel=channel,
            )
        finally:
            await context.close()
