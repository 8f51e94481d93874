"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from codoc.core.builder import CodocParser
from codoc.core.diff import StructuralDiffEngine

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------

SAMPLE_OUTLINE = """\
/src
  /services
    auth.ts
      $login()
      $logout()
      @utils.validateInput
      # handles session tokens
  utils.ts
    $validateInput()
    %Button
"""


@pytest.fixture
def parser() -> CodocParser:
    return CodocParser()


@pytest.fixture
def engine() -> StructuralDiffEngine:
    return StructuralDiffEngine()


@pytest.fixture
def sample_outline() -> str:
    return SAMPLE_OUTLINE


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"
