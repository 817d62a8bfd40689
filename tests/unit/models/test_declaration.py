"""Tests for suite declaration models."""

import pytest
from pydantic import ValidationError

from wasm_test_bridge.declarations import (
    COMPACT_PUBLIC_KEY_SUITE,
    ZERO_KNOWLEDGE_TIMEOUT_MS,
)
from wasm_test_bridge.models.declaration import (
    DEFAULT_TIMEOUT_MS,
    SuiteDeclaration,
    TestCase,
)
from wasm_test_bridge.testing.factories import (
    SuiteDeclarationFactory,
    TestCaseFactory,
)


class TestTestCase:
    """Tests for TestCase validation."""

    @pytest.mark.parametrize("timeout_ms", [0, -5])
    def test_rejects_non_positive_timeout(self, timeout_ms: int) -> None:
        """Zero or negative timeouts are configuration errors."""
        with pytest.raises(ValidationError):
            TestCase(description="d", identifier="id", timeout_ms=timeout_ms)

    def test_rejects_empty_identifier(self) -> None:
        """Identifiers must not be empty."""
        with pytest.raises(ValidationError):
            TestCase(description="d", identifier="")

    def test_is_immutable(self) -> None:
        """Declared cases cannot be modified after load."""
        case = TestCaseFactory.build()

        with pytest.raises(ValidationError):
            case.identifier = "other"  # type: ignore[misc]


class TestSuiteDeclaration:
    """Tests for SuiteDeclaration."""

    def test_timeout_for_uses_override(self) -> None:
        """A per-case override wins over the suite default."""
        case = TestCase(description="d", identifier="zk", timeout_ms=1234)
        suite = SuiteDeclaration(tests=[case])

        assert suite.timeout_for(case) == 1234

    def test_timeout_for_falls_back_to_default(self) -> None:
        """Cases without an override use the suite default."""
        case = TestCase(description="d", identifier="keygen")
        suite = SuiteDeclaration(default_timeout_ms=1000, tests=[case])

        assert suite.timeout_for(case) == 1000

    def test_rejects_duplicate_identifiers(self) -> None:
        """Each identifier can be declared once."""
        with pytest.raises(ValidationError, match="Duplicate test identifier"):
            SuiteDeclaration(
                tests=[
                    TestCase(description="a", identifier="same"),
                    TestCase(description="b", identifier="same"),
                ]
            )

    def test_rejects_non_positive_default(self) -> None:
        """The suite default must be positive too."""
        with pytest.raises(ValidationError):
            SuiteDeclaration(default_timeout_ms=0)

    def test_select_keeps_declaration_order(self) -> None:
        """Selecting identifiers keeps the declared order."""
        suite = COMPACT_PUBLIC_KEY_SUITE.select(
            ["compactPublicKeyZeroKnowledge", "compressedCompactPublicKeyTest256BitSmall"]
        )

        assert [case.identifier for case in suite.tests] == [
            "compressedCompactPublicKeyTest256BitSmall",
            "compactPublicKeyZeroKnowledge",
        ]

    def test_select_empty_keeps_everything(self) -> None:
        """An empty selection is the whole suite."""
        suite = SuiteDeclarationFactory.build()

        assert suite.select([]) is suite

    def test_select_unknown_identifier(self) -> None:
        """Selecting an undeclared identifier is an error."""
        with pytest.raises(ValueError, match="Unknown test identifiers: nope"):
            COMPACT_PUBLIC_KEY_SUITE.select(["nope"])


class TestCompactPublicKeySuite:
    """Tests for the built-in suite."""

    def test_declares_three_scenarios(self) -> None:
        """Declares the compressed and zero-knowledge scenarios."""
        assert [case.identifier for case in COMPACT_PUBLIC_KEY_SUITE.tests] == [
            "compressedCompactPublicKeyTest256BitSmall",
            "compressedCompactPublicKeyTest256BitBig",
            "compactPublicKeyZeroKnowledge",
        ]

    def test_zero_knowledge_gets_twenty_minutes(self) -> None:
        """The proof scenario overrides the timeout to 1,200,000 ms."""
        zk = COMPACT_PUBLIC_KEY_SUITE.tests[2]

        assert ZERO_KNOWLEDGE_TIMEOUT_MS == 1_200_000
        assert COMPACT_PUBLIC_KEY_SUITE.timeout_for(zk) == 1_200_000

    def test_other_scenarios_use_shorter_default(self) -> None:
        """Lighter scenarios use the materially smaller default."""
        for case in COMPACT_PUBLIC_KEY_SUITE.tests[:2]:
            assert COMPACT_PUBLIC_KEY_SUITE.timeout_for(case) == DEFAULT_TIMEOUT_MS
        assert DEFAULT_TIMEOUT_MS < ZERO_KNOWLEDGE_TIMEOUT_MS
