"""Fixtures for settings feature tests."""

import pytest

from modules.settings.handlers import SettingsHandlers
from modules.settings.repository import SettingsRepository


@pytest.fixture
def repository(kv_store):
    return SettingsRepository(kv_store, options_key="test_options")


@pytest.fixture
def settings_handlers(repository):
    return SettingsHandlers(repository)
