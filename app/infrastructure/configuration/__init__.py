"""Configuration sections and the Settings aggregate.

Application code reads configuration through
``infrastructure.services.get_settings()``; the classes are exported for
tests and for building services with explicit overrides.
"""

from infrastructure.configuration.features import AdminStylerSettings
from infrastructure.configuration.infrastructure import (
    DispatchSettings,
    RetrySettings,
    SecuritySettings,
    StoreSettings,
)
from infrastructure.configuration.settings import Settings

__all__ = [
    "Settings",
    "AdminStylerSettings",
    "DispatchSettings",
    "RetrySettings",
    "SecuritySettings",
    "StoreSettings",
]
