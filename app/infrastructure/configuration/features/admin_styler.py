"""Admin styler feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class AdminStylerSettings(FeatureSettings):
    """Configuration for the settings-customization feature.

    Environment Variables:
        ADMIN_STYLER_OPTIONS_KEY: Store key holding the saved option document
    """

    options_key: str = Field(
        default="las_fresh_options",
        alias="ADMIN_STYLER_OPTIONS_KEY",
        description="Key under which saved settings are stored",
    )
