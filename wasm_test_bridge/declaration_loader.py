"""Load test suite declarations from YAML files."""

import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from wasm_test_bridge.models.declaration import SuiteDeclaration

log = logging.getLogger(__name__)


async def load_suite_declaration(path: Path) -> SuiteDeclaration:
    """Load and validate a suite declaration.

    Args:
        path: Path to the YAML declaration file

    Returns:
        The validated suite declaration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, not valid YAML or fails validation

    """
    if not path.is_file():
        raise FileNotFoundError(f"Declaration file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty declaration file: {path}")

    try:
        suite = SuiteDeclaration.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid test declaration schema in {path}: {e}") from e

    log.debug("Loaded %d test case(s) from %s", len(suite.tests), path)
    return suite
