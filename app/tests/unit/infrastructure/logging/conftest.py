"""Fixtures for infrastructure.logging tests."""

import pytest

from infrastructure.configuration import Settings


@pytest.fixture
def dev_settings():
    """Non-production settings at DEBUG level."""
    return Settings(PREFIX="dev-", LOG_LEVEL="DEBUG")
