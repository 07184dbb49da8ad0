from __future__ import annotations

from pathlib import Path

import pytest

from declgen.context import GenerationContext
from declgen.overlays.store import OverlayStore
from tests._fixtures.model_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a project directory rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def context() -> GenerationContext:
    """In-memory generation context with an empty overlay store."""
    return GenerationContext(overlays=OverlayStore())
