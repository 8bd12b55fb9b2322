"""Key-value store infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class StoreSettings(InfrastructureSettings):
    """Backing key-value store configuration.

    Environment Variables:
        STORE_BACKEND: 'memory' or 'redis' (default: memory)
        STORE_REDIS_HOST: Redis/Valkey host
        STORE_REDIS_PORT: Redis/Valkey port (default: 6379)
        STORE_REDIS_DB: Redis database index (default: 0)
        STORE_KEY_PREFIX: Prefix applied to every key written by the application
    """

    backend: str = Field(
        default="memory",
        alias="STORE_BACKEND",
        description="Store backend: 'memory' or 'redis'",
    )
    redis_host: str = Field(default="localhost", alias="STORE_REDIS_HOST")
    redis_port: int = Field(default=6379, alias="STORE_REDIS_PORT")
    redis_db: int = Field(default=0, alias="STORE_REDIS_DB")
    key_prefix: str = Field(
        default="admin_styler",
        alias="STORE_KEY_PREFIX",
        description="Prefix applied to every key",
    )
