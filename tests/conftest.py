"""Pytest configuration and shared fixtures."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test (e.g. a CLI run) applied."""
    yield
    structlog.reset_defaults()
