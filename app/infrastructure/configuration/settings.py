"""Top-level Settings object assembled from the configuration sections."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.features import AdminStylerSettings
from infrastructure.configuration.infrastructure import (
    DispatchSettings,
    RetrySettings,
    SecuritySettings,
    StoreSettings,
)


class Settings(BaseSettings):
    """Process-wide configuration.

    Sections are built from their own environment variables unless passed
    in explicitly, which is how tests override a single concern:

        Settings(retry=RetrySettings(RETRY_MAX_RETRIES=5))

    Environment Variables:
        PREFIX: Deployment prefix; empty means production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Commit reported by the /version endpoint
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    admin_styler: AdminStylerSettings = Field(default_factory=AdminStylerSettings)

    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    store: StoreSettings = Field(default_factory=StoreSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return not self.PREFIX
