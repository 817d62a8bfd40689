"""CLI entry point for running WASM parallel test suites in a browser."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from wasm_test_bridge.browser import BrowserSession
from wasm_test_bridge.config import HarnessConfig
from wasm_test_bridge.declaration_loader import load_suite_declaration
from wasm_test_bridge.declarations import COMPACT_PUBLIC_KEY_SUITE
from wasm_test_bridge.models.declaration import SuiteDeclaration
from wasm_test_bridge.orchestrator import CaseResult, SuiteOrchestrator

STATUS_SYMBOLS = {
    None: "✓",
    "computation": "✗",
    "configuration": "!",
    "timeout": "⏱",
}


def log_results_summary(log: logging.Logger, case_results: Sequence[CaseResult]) -> None:
    """Log a formatted summary of test case results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in case_results:
        outcome = result.outcome
        symbol = STATUS_SYMBOLS.get(outcome.kind, "?")
        log.info(
            "%s %s [%s]: %s (%.2fs)",
            symbol,
            result.case.description,
            result.case.identifier,
            outcome.status,
            outcome.duration,
        )
        if outcome.reason:
            log.info("  Reason: %s", outcome.reason)


def build_config(
    config_json: str,
    page_url: str | None = None,
    serve_dir: Path | None = None,
    max_parallel: int | None = None,
) -> HarnessConfig:
    """Build the harness configuration from JSON and command-line overrides."""
    config_dict: dict[str, Any] = json.loads(config_json) if config_json else {}
    if page_url is not None:
        config_dict["page_url"] = page_url
    if serve_dir is not None:
        config_dict["serve_dir"] = serve_dir
    if max_parallel is not None:
        config_dict["max_parallel"] = max_parallel
    return HarnessConfig(**config_dict)


async def load_suite(suite_path: Path | None, only: Sequence[str]) -> SuiteDeclaration:
    """Load the declared suite, defaulting to the built-in one."""
    if suite_path is None:
        suite = COMPACT_PUBLIC_KEY_SUITE
    else:
        suite = await load_suite_declaration(suite_path)
    return suite.select(only)


async def run(
    config: HarnessConfig,
    suite_path: Path | None = None,
    only: Sequence[str] = (),
) -> int:
    """Run the suite and return the exit code."""
    log = logging.getLogger("wasm_test_bridge")

    suite = await load_suite(suite_path, only)
    if not suite.tests:
        log.info("No test cases to run")
        print(json.dumps(format_output([])))
        return 0

    async with BrowserSession.from_config(config) as session:
        orchestrator = SuiteOrchestrator(
            bridge_factory=session.bridge, max_parallel=config.max_parallel
        )
        case_results = await orchestrator.run_suite(suite)

    log_results_summary(log, case_results)

    print(json.dumps(format_output(case_results), indent=2))

    return 0 if all(result.outcome.ok for result in case_results) else 1


def format_output(case_results: Sequence[CaseResult]) -> dict[str, Any]:
    """Format case results for JSON output."""
    all_results: list[dict[str, Any]] = [
        {
            "description": result.case.description,
            "identifier": result.case.identifier,
            "status": result.outcome.status,
            "kind": result.outcome.kind,
            "reason": result.outcome.reason,
            "duration": result.outcome.duration,
        }
        for result in case_results
    ]

    def _count(kind: str) -> int:
        return sum(1 for r in all_results if r["kind"] == kind)

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "success"),
        "failed": _count("computation"),
        "timeouts": _count("timeout"),
        "misconfigured": _count("configuration"),
        "results": all_results,
    }


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run WASM parallel test suites in a headless browser"
    )
    parser.add_argument(
        "--suite",
        type=Path,
        default=None,
        help="YAML suite declaration (defaults to the compact public key suite)",
    )
    parser.add_argument(
        "--config",
        default="",
        help="JSON configuration for the harness",
    )
    parser.add_argument(
        "--page-url",
        default=None,
        help="URL of the page under test (relative when --serve-dir is set)",
    )
    parser.add_argument(
        "--serve-dir",
        type=Path,
        default=None,
        help="Directory holding the built page, served with isolation headers",
    )
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        help="Run only this test identifier (repeatable)",
    )
    parser.add_argument(
        "--max-parallel",
        type=int,
        default=None,
        help="Maximum number of pages running tests at the same time",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = build_config(
        args.config,
        page_url=args.page_url,
        serve_dir=args.serve_dir,
        max_parallel=args.max_parallel,
    )
    exit_code = asyncio.run(run(config, suite_path=args.suite, only=args.only))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
