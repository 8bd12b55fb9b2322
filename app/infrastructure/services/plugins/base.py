"""Base plugin discovery utilities."""

import importlib
import pkgutil
from typing import List

import pluggy

from infrastructure.logging import get_module_logger

logger = get_module_logger()


def auto_discover_plugins(
    pm: pluggy.PluginManager,
    base_packages: List[str],
) -> None:
    """Auto-discover and register plugins from base packages.

    Each sub-package of a base package is imported and registered with the
    plugin manager, which picks up its @hookimpl functions. A package that
    fails to import is logged and skipped.

    Args:
        pm: Plugin manager to register plugins with.
        base_packages: Importable base packages to scan (e.g., ["modules"]).

    Example:
        >>> pm = pluggy.PluginManager("admin_styler")
        >>> pm.add_hookspecs(hookspecs.commands)
        >>> auto_discover_plugins(pm, base_packages=["modules"])
    """
    for base_package in base_packages:
        try:
            package = importlib.import_module(base_package)
        except ImportError:
            logger.warning("base_package_not_found", package=base_package)
            continue

        for pkg_info in pkgutil.iter_modules(package.__path__):
            if not pkg_info.ispkg:
                continue

            module_name = f"{base_package}.{pkg_info.name}"
            try:
                module = importlib.import_module(module_name)
                if not pm.is_registered(module):
                    pm.register(module)
                logger.debug("plugin_registered", module=module_name)
            except Exception as e:  # pylint: disable=broad-except
                logger.error(
                    "plugin_registration_failed",
                    module=module_name,
                    error=str(e),
                    exc_info=True,
                )
