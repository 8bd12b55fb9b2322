"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection,
and the hookimpl marker used by feature packages to register handlers.
"""

from infrastructure.services.dependencies import (
    CommandServiceDep,
    SessionManagerDep,
    SettingsDep,
)
from infrastructure.services.plugins import hookimpl
from infrastructure.services.providers import (
    get_command_service,
    get_session_manager,
    get_settings,
    get_signing_key,
)

__all__ = [
    "CommandServiceDep",
    "SessionManagerDep",
    "SettingsDep",
    "get_command_service",
    "get_session_manager",
    "get_settings",
    "get_signing_key",
    "hookimpl",
]
