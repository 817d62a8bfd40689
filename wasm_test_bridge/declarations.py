"""Built-in declaration of the compact public key suite."""

from wasm_test_bridge.models.declaration import SuiteDeclaration, TestCase

ZERO_KNOWLEDGE_TIMEOUT_MS = 1200 * 1000  # 20 minutes

COMPACT_PUBLIC_KEY_SUITE = SuiteDeclaration(
    version="1.0",
    tests=[
        TestCase(
            description="Compressed Compact Public Key Test Small 256 Bit",
            identifier="compressedCompactPublicKeyTest256BitSmall",
        ),
        TestCase(
            description="Compressed Compact Public Key Test Big 256 Bit",
            identifier="compressedCompactPublicKeyTest256BitBig",
        ),
        TestCase(
            description="Compact Public Key Test Big 64 Bit With Zero Knowledge",
            identifier="compactPublicKeyZeroKnowledge",
            timeout_ms=ZERO_KNOWLEDGE_TIMEOUT_MS,
        ),
    ],
)
