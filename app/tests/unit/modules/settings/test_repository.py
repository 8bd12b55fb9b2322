"""Unit tests for the settings repository."""

import pytest

from modules.settings.repository import DEFAULT_SETTINGS


class TestSettingsRepository:
    """Tests for SettingsRepository."""

    def test_load_defaults(self, repository):
        assert repository.load() == DEFAULT_SETTINGS

    def test_save_merges_over_defaults(self, repository, kv_store):
        result = repository.save({"menu_font_size": 16})

        assert result["menu_font_size"] == 16
        assert result["menu_text_color"] == DEFAULT_SETTINGS["menu_text_color"]
        assert kv_store.get("test_options") == {"menu_font_size": 16}

    def test_save_accumulates(self, repository):
        repository.save({"menu_font_size": 16})
        repository.save({"adminbar_height": 40})

        loaded = repository.load()
        assert loaded["menu_font_size"] == 16
        assert loaded["adminbar_height"] == 40

    def test_save_rejects_unknown_keys(self, repository):
        with pytest.raises(ValueError, match="unknown_key"):
            repository.save({"unknown_key": 1})

    def test_load_subset(self, repository):
        assert repository.load(["menu_font_size", "missing"]) == {"menu_font_size": 14}

    def test_reset(self, repository, kv_store):
        repository.save({"menu_font_size": 16})

        assert repository.reset() == DEFAULT_SETTINGS
        assert kv_store.get("test_options") is None
