"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.commands.service import CommandService
from infrastructure.configuration import Settings
from infrastructure.security import SessionManager
from infrastructure.services.providers import (
    get_command_service,
    get_session_manager,
    get_settings,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Command service dependency (registry, dispatcher, retry queue)
CommandServiceDep = Annotated[CommandService, Depends(get_command_service)]

# Session manager dependency - resolves bearer sessions into actors
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]

__all__ = [
    "SettingsDep",
    "CommandServiceDep",
    "SessionManagerDep",
]
