"""Settings module - command handler registration."""

from infrastructure.services import hookimpl
from modules.settings.handlers import register
from modules.settings.repository import SettingsRepository


@hookimpl
def register_command_handlers(registry, kv_store, settings):
    """Register the settings actions with the command registry."""
    repository = SettingsRepository(kv_store, settings.admin_styler.options_key)
    register(registry, repository)
