"""
Shared pytest fixtures and configuration for op-manager tests.

This module provides:
- Automatic ``unit`` / ``integration`` markers
- structlog reset between tests so log capture is deterministic
- Managers pre-loaded with the shared operation doubles
"""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from opmanager.core.settings import get_settings
from opmanager.testing import EventRecorder
from tests._support import ALLOWED, Manager


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults, root logging and cached settings around each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    structlog.reset_defaults()
    get_settings.cache_clear()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    get_settings.cache_clear()


# =============================================================================
# Manager Fixtures
# =============================================================================


@pytest.fixture
def manager() -> Manager:
    """Permissive manager allowing kinds a, b and c."""
    return Manager(ALLOWED)


@pytest.fixture
def recorder(manager: Manager) -> EventRecorder:
    """Recorder attached to ``manager`` before any operation exists."""
    return EventRecorder(manager)
