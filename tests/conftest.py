"""Shared pytest configuration and fixtures for fxa-oauth tests."""

import logging
import os

import pytest

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_servers"]

from tests.config import FXA_ENV_VARS


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires services)"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "tests/unit/" in path or "tests/cli/" in path:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in path:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="function", autouse=True)
def clean_fxa_environment(monkeypatch):
    """Run every test without FxA settings from the developer's shell or .env."""
    for key in FXA_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo configure_root_logging() so handlers never outlive a test's streams."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def debug_log_path(tmp_path, monkeypatch):
    """Point the debug log at a temporary file."""
    path = tmp_path / "fxa-debug.log"
    monkeypatch.setenv("FXA_DEBUG_LOG", os.fspath(path))
    return path
