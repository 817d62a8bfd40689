"""Suite orchestrator running declared test cases through completion bridges."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import TypeAlias

from wasm_test_bridge.bridge import CompletionBridge
from wasm_test_bridge.models.declaration import SuiteDeclaration, TestCase
from wasm_test_bridge.models.outcome import Outcome

log = logging.getLogger(__name__)

BridgeFactory: TypeAlias = Callable[[], AbstractAsyncContextManager[CompletionBridge]]


@dataclass(frozen=True, kw_only=True)
class CaseResult:
    """Outcome of one declared test case."""

    case: TestCase
    outcome: Outcome


@dataclass(frozen=True, kw_only=True)
class SuiteOrchestrator:
    """Runs every case of a suite, each on its own bridge.

    A bridge is opened per case so that an abandoned computation never
    shares a page with the next case. At most ``max_parallel`` bridges are
    open at the same time.
    """

    bridge_factory: BridgeFactory
    max_parallel: int = 1

    async def run_suite(self, suite: SuiteDeclaration) -> Sequence[CaseResult]:
        """Run all cases of the suite.

        Returns:
            One result per case, in declaration order

        """
        if not suite.tests:
            log.info("No test cases declared")
            return []

        log.info(
            "Running %d test case(s) with max_parallel=%d",
            len(suite.tests),
            self.max_parallel,
        )
        semaphore = asyncio.Semaphore(self.max_parallel)
        tasks = [
            self._run_case(semaphore, case, suite.timeout_for(case))
            for case in suite.tests
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)
        log.info("Suite execution completed")

        return self._process_results(suite.tests, results)

    def _process_results(
        self,
        cases: Sequence[TestCase],
        results: Sequence[Outcome | BaseException],
    ) -> Sequence[CaseResult]:
        """Pair outcomes with their cases, turning exceptions into failures."""
        final_results: list[CaseResult] = []

        for case, result in zip(cases, results, strict=True):
            if isinstance(result, Outcome):
                outcome = result
            elif isinstance(result, Exception):
                log.error(
                    "Test case %s raised: %s", case.identifier, result, exc_info=result
                )
                outcome = Outcome.failure(f"error: {result}")
            else:
                raise result

            log.info(
                "Test completed: identifier=%s status=%s duration=%.1fs",
                case.identifier,
                outcome.status,
                outcome.duration,
            )
            final_results.append(CaseResult(case=case, outcome=outcome))

        return final_results

    async def _run_case(
        self, semaphore: asyncio.Semaphore, case: TestCase, timeout_ms: int
    ) -> Outcome:
        async with semaphore:
            log.info(
                "Running %s (%s), timeout=%dms",
                case.identifier,
                case.description,
                timeout_ms,
            )
            async with self.bridge_factory() as bridge:
                return await bridge.run(case.identifier, timeout_ms)
