"""Hook specifications for command handler registration."""

import pluggy
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.commands.registry import HandlerRegistry
    from infrastructure.configuration import Settings
    from infrastructure.persistence import KeyValueStore

hookspec = pluggy.HookspecMarker("admin_styler")


@hookspec
def register_command_handlers(
    registry: "HandlerRegistry", kv_store: "KeyValueStore", settings: "Settings"
) -> None:
    """Register a feature's command handlers.

    Args:
        registry: Handler registry owned by the command service.
        kv_store: Shared key-value store available to the feature.
        settings: Application settings.
    """
