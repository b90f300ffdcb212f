"""Shared pytest fixtures for recordcsv tests."""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

_project_src = Path(__file__).parent.parent / "src"
if str(_project_src) not in sys.path:
    sys.path.insert(0, str(_project_src))

from recordcsv.logging import UnifiedLogger  # noqa: E402

pytest_plugins = [
    "tests.fixtures.records",
]


@pytest.fixture(autouse=True)
def reset_logger_context() -> Generator[None, None, None]:
    UnifiedLogger.reset()
    yield
    UnifiedLogger.reset()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo handlers installed by ``UnifiedLogger.configure`` during a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
