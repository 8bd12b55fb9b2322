"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.admin_styler import AdminStylerSettings

__all__ = [
    "AdminStylerSettings",
]
