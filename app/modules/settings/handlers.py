"""Command handlers for the settings feature."""

import time
from typing import Any, Dict

from infrastructure.commands.errors import ValidationError
from infrastructure.commands.registry import HandlerRegistry
from modules.settings.actions import SettingsAction
from modules.settings.repository import SettingsRepository
from modules.settings.schemas import GetSettingsPayload, SaveSettingsPayload

READ_CAPABILITY = "read"


class SettingsHandlers:
    """Handlers bound to one settings repository."""

    def __init__(self, repository: SettingsRepository):
        self.repository = repository

    def save_settings(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not payload:
            raise ValidationError("No settings provided")
        try:
            settings = self.repository.save(payload)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        return {"settings": settings, "saved": sorted(payload)}

    def get_settings(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"settings": self.repository.load(payload.get("keys"))}

    def reset_settings(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"settings": self.repository.reset()}

    def ping(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"pong": True, "timestamp": int(time.time())}


def register(
    registry: HandlerRegistry, repository: SettingsRepository
) -> SettingsHandlers:
    """Register the settings actions and verify the action set is complete."""
    handlers = SettingsHandlers(repository)

    registry.register(
        SettingsAction.SAVE_SETTINGS,
        handlers.save_settings,
        payload_model=SaveSettingsPayload,
        retry_enabled=True,
    )
    registry.register(
        SettingsAction.GET_SETTINGS,
        handlers.get_settings,
        payload_model=GetSettingsPayload,
        retry_enabled=False,
    )
    registry.register(
        SettingsAction.RESET_SETTINGS,
        handlers.reset_settings,
        retry_enabled=True,
    )
    registry.register(
        SettingsAction.PING,
        handlers.ping,
        capability=READ_CAPABILITY,
        allow_anonymous=True,
        retry_enabled=False,
    )

    registry.require(SettingsAction)
    return handlers
