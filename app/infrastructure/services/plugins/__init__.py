"""Plugin managers and utilities."""

import pluggy

from infrastructure.services.plugins.commands import (
    discover_and_register_handlers,
    get_command_plugin_manager,
)

# Singleton hookimpl marker for entire application
hookimpl = pluggy.HookimplMarker("admin_styler")

__all__ = [
    "hookimpl",
    "get_command_plugin_manager",
    "discover_and_register_handlers",
]
