"""Base classes for configuration sections.

Each section reads its own environment variables through field aliases
(``RETRY_MAX_RETRIES``, ``DISPATCH_WINDOW_S``, ...) and the shared .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
    populate_by_name=True,
)


class FeatureSettings(BaseSettings):
    """Section owned by a feature module, such as the admin styler options."""

    model_config = SECTION_CONFIG


class InfrastructureSettings(BaseSettings):
    """Section controlling dispatch, retry, token signing or storage."""

    model_config = SECTION_CONFIG
