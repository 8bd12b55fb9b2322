"""Command handler plugin manager."""

from functools import lru_cache
from typing import TYPE_CHECKING, List, Optional

import pluggy

from infrastructure.hookspecs import commands as command_hookspecs
from infrastructure.logging import get_module_logger
from infrastructure.services.plugins.base import auto_discover_plugins

if TYPE_CHECKING:
    from infrastructure.commands.registry import HandlerRegistry
    from infrastructure.configuration import Settings
    from infrastructure.persistence import KeyValueStore

logger = get_module_logger()

FEATURE_PACKAGES = ["modules"]


@lru_cache(maxsize=1)
def get_command_plugin_manager() -> pluggy.PluginManager:
    """Get the command handler plugin manager singleton.

    Returns:
        PluginManager configured for command handler registration.
    """
    pm = pluggy.PluginManager("admin_styler")
    pm.add_hookspecs(command_hookspecs)

    logger.info("command_plugin_manager_created")
    return pm


def discover_and_register_handlers(
    registry: "HandlerRegistry",
    kv_store: "KeyValueStore",
    settings: "Settings",
    base_packages: Optional[List[str]] = None,
) -> None:
    """Discover feature packages and let each register its handlers."""
    pm = get_command_plugin_manager()

    auto_discover_plugins(pm, base_packages=base_packages or FEATURE_PACKAGES)
    logger.info("command_plugins_discovered", plugin_count=len(pm.get_plugins()))

    pm.hook.register_command_handlers(
        registry=registry, kv_store=kv_store, settings=settings
    )
    logger.info("command_handlers_registered", handlers=len(registry))
