"""Settings persistence over the shared key-value store."""

from typing import Any, Dict, Iterable, Optional

from infrastructure.logging import get_module_logger
from infrastructure.persistence import KeyValueStore

logger = get_module_logger()

DEFAULT_SETTINGS: Dict[str, Any] = {
    "menu_background_color": "#23282d",
    "menu_text_color": "#ffffff",
    "menu_hover_color": "#0073aa",
    "menu_active_color": "#0073aa",
    "menu_font_size": 14,
    "menu_font_family": "default",
    "adminbar_background": "#23282d",
    "adminbar_text_color": "#ffffff",
    "adminbar_hover_color": "#0073aa",
    "adminbar_height": 32,
    "content_background": "#f1f1f1",
    "content_text_color": "#333333",
    "content_link_color": "#0073aa",
    "enable_live_preview": True,
    "enable_custom_css": False,
    "enable_responsive_design": True,
    "animation_speed": "normal",
    "cache_css": True,
    "minify_css": False,
    "custom_css": "",
    "admin_menu_detached": False,
    "admin_bar_detached": False,
}


class SettingsRepository:
    """Reads and writes the admin styler options document.

    Stored values override the defaults; keys without a stored value read
    as their default.
    """

    def __init__(self, store: KeyValueStore, options_key: str = "las_fresh_options"):
        self.store = store
        self.options_key = options_key

    def _stored(self) -> Dict[str, Any]:
        stored = self.store.get(self.options_key)
        return stored if isinstance(stored, dict) else {}

    def load(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        settings = {**DEFAULT_SETTINGS, **self._stored()}
        if keys is None:
            return settings
        return {key: settings[key] for key in keys if key in settings}

    def save(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Merge updates into the stored options and return the full result."""
        unknown = sorted(set(updates) - set(DEFAULT_SETTINGS))
        if unknown:
            raise ValueError(f"Unknown setting keys: {', '.join(unknown)}")

        stored = self._stored()
        stored.update(updates)
        self.store.set(self.options_key, stored)
        logger.info("settings_saved", fields=sorted(updates))
        return {**DEFAULT_SETTINGS, **stored}

    def reset(self) -> Dict[str, Any]:
        self.store.delete(self.options_key)
        logger.info("settings_reset")
        return dict(DEFAULT_SETTINGS)
