"""Models for test suite declarations loaded from YAML files."""

from collections.abc import Sequence

from pydantic import Field, model_validator

from wasm_test_bridge.models.base import Model

DEFAULT_TIMEOUT_MS = 5 * 60 * 1000


class TestCase(Model):
    """A single named scenario bound to a page trigger."""

    __test__ = False

    description: str = Field(..., description="Human-readable test description")
    identifier: str = Field(
        ..., min_length=1, description="Identifier of the page trigger to activate"
    )
    timeout_ms: int | None = Field(
        default=None,
        gt=0,
        description="Per-test timeout override in milliseconds",
    )


class SuiteDeclaration(Model):
    """Complete declaration of a test suite."""

    version: str = Field(default="1.0", description="Declaration schema version")
    default_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        description="Timeout for cases without an override",
    )
    tests: Sequence[TestCase] = Field(
        default_factory=list, description="Declared test cases"
    )

    @model_validator(mode="after")
    def _check_unique_identifiers(self) -> "SuiteDeclaration":
        seen: set[str] = set()
        for case in self.tests:
            if case.identifier in seen:
                raise ValueError(f"Duplicate test identifier '{case.identifier}'")
            seen.add(case.identifier)
        return self

    def timeout_for(self, case: TestCase) -> int:
        """Resolve the effective timeout of a case in milliseconds."""
        if case.timeout_ms is not None:
            return case.timeout_ms
        return self.default_timeout_ms

    def select(self, identifiers: Sequence[str]) -> "SuiteDeclaration":
        """Return a suite restricted to the given identifiers.

        An empty selection keeps every case.

        Raises:
            ValueError: If an identifier is not declared in the suite

        """
        if not identifiers:
            return self
        declared = {case.identifier for case in self.tests}
        unknown = sorted(set(identifiers) - declared)
        if unknown:
            raise ValueError(f"Unknown test identifiers: {', '.join(unknown)}")
        wanted = set(identifiers)
        return self.model_copy(
            update={"tests": [case for case in self.tests if case.identifier in wanted]}
        )
