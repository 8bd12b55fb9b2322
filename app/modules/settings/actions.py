"""Closed set of actions owned by the settings feature."""

from enum import Enum


class SettingsAction(str, Enum):
    SAVE_SETTINGS = "save_settings"
    GET_SETTINGS = "get_settings"
    RESET_SETTINGS = "reset_settings"
    PING = "ping"
