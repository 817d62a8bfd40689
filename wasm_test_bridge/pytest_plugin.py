"""Pytest plugin running declared test cases against a browser page.

Enable it with ``-p wasm_test_bridge.pytest_plugin``.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from wasm_test_bridge.bridge import CompletionBridge
from wasm_test_bridge.browser import BrowserSession
from wasm_test_bridge.config import HarnessConfig, LegacyDomSignalConfig
from wasm_test_bridge.errors import HarnessError
from wasm_test_bridge.models.declaration import (
    DEFAULT_TIMEOUT_MS,
    SuiteDeclaration,
    TestCase,
)
from wasm_test_bridge.models.outcome import Outcome


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("wasm-test-bridge")
    group.addoption(
        "--wasm-page-url",
        default=None,
        help="URL of the page exposing the test triggers",
    )
    group.addoption(
        "--wasm-serve-dir",
        type=Path,
        default=None,
        help="Directory holding the built page, served with isolation headers",
    )
    group.addoption(
        "--wasm-chromium-path",
        default=None,
        help="Chromium executable (defaults to CHROMIUM_PATH or the bundled one)",
    )
    group.addoption(
        "--wasm-legacy-dom-signal",
        action="store_true",
        default=False,
        help="Read completion from #loader and #testSuccess instead of the mailbox",
    )
    group.addoption(
        "--wasm-ready-expression",
        default=None,
        help="JavaScript expression that is truthy once the page is ready",
    )
    group.addoption(
        "--wasm-ready-timeout-ms",
        type=int,
        default=60_000,
        help="Maximum wait for the page to become ready",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "browser: drives the WASM test page in a real browser"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--wasm-page-url") or config.getoption("--wasm-serve-dir"):
        return
    skip = pytest.mark.skip(reason="needs --wasm-page-url or --wasm-serve-dir")
    for item in items:
        if "browser" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def harness_config(pytestconfig: pytest.Config) -> HarnessConfig:
    """Harness configuration built from the command-line options."""
    return HarnessConfig(
        page_url=pytestconfig.getoption("--wasm-page-url"),
        serve_dir=pytestconfig.getoption("--wasm-serve-dir"),
        chromium_path=pytestconfig.getoption("--wasm-chromium-path"),
        ready_expression=pytestconfig.getoption("--wasm-ready-expression"),
        ready_timeout_ms=pytestconfig.getoption("--wasm-ready-timeout-ms"),
        legacy_dom_signal=(
            LegacyDomSignalConfig()
            if pytestconfig.getoption("--wasm-legacy-dom-signal")
            else None
        ),
    )


@pytest_asyncio.fixture
async def completion_bridge(
    harness_config: HarnessConfig,
) -> AsyncGenerator[CompletionBridge, None]:
    """Bridge bound to a freshly launched browser and page."""
    async with BrowserSession.from_config(harness_config) as session:
        async with session.bridge() as bridge:
            yield bridge


async def run_declared_case(
    bridge: CompletionBridge,
    case: TestCase,
    suite: SuiteDeclaration | None = None,
) -> Outcome:
    """Run a declared case and fail the current test unless it succeeds."""
    if suite is not None:
        timeout_ms = suite.timeout_for(case)
    else:
        timeout_ms = case.timeout_ms or DEFAULT_TIMEOUT_MS

    outcome = await bridge.run(case.identifier, timeout_ms)
    try:
        outcome.raise_for_failure()
    except HarnessError as exc:
        pytest.fail(f"{case.description}: {exc}", pytrace=False)
    return outcome
