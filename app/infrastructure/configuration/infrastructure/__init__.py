"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.dispatch import DispatchSettings
from infrastructure.configuration.infrastructure.retry import RetrySettings
from infrastructure.configuration.infrastructure.security import SecuritySettings
from infrastructure.configuration.infrastructure.store import StoreSettings

__all__ = [
    "DispatchSettings",
    "RetrySettings",
    "SecuritySettings",
    "StoreSettings",
]
