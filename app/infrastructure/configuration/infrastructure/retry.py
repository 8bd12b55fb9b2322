"""Retry queue infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry queue configuration for failed command dispatches.

    Environment Variables:
        RETRY_MAX_RETRIES: Attempts before a ticket is abandoned (default: 3)
        RETRY_BASE_DELAY_MS: Base exponential backoff delay (default: 1000ms)
        RETRY_MAX_DELAY_MS: Backoff ceiling (default: 30000ms)
        RETRY_QUEUE_SIZE_MAX: Maximum queued tickets (default: 100)
        RETRY_RETENTION_H: Age after which cleanup drops a ticket (default: 24h)
        RETRY_QUEUE_KEY: Store key holding the whole queue document
        RETRY_PROCESS_INTERVAL_SECONDS: Sweep cadence for the scheduler
        RETRY_CLEANUP_INTERVAL_MINUTES: Cleanup cadence for the scheduler

    Exponential Backoff:
        Delay calculation: min(base_delay * (2 ^ attempts), max_delay)

        Example with defaults (base=1000ms, max=30000ms):
            Attempt 1: 2000ms
            Attempt 2: 4000ms
            Attempt 3: 8000ms
            Attempt 5: 30000ms (capped)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        max_retries = settings.retry.max_retries
        ```
    """

    max_retries: int = Field(
        default=3,
        alias="RETRY_MAX_RETRIES",
        description="Maximum retry attempts before a ticket is abandoned",
    )
    base_delay_ms: int = Field(
        default=1000,
        alias="RETRY_BASE_DELAY_MS",
        description="Base delay for exponential backoff (milliseconds)",
    )
    max_delay_ms: int = Field(
        default=30000,
        alias="RETRY_MAX_DELAY_MS",
        description="Maximum delay for exponential backoff (milliseconds)",
    )
    queue_size_max: int = Field(
        default=100,
        alias="RETRY_QUEUE_SIZE_MAX",
        description="Maximum number of tickets held in the retry queue",
    )
    retention_h: int = Field(
        default=24,
        alias="RETRY_RETENTION_H",
        description="Tickets older than this many hours are removed by cleanup",
    )
    queue_key: str = Field(
        default="command_retry_queue",
        alias="RETRY_QUEUE_KEY",
        description="Key under which the queue document is stored",
    )
    process_interval_seconds: int = Field(
        default=60,
        alias="RETRY_PROCESS_INTERVAL_SECONDS",
        description="How often the scheduler sweeps the queue (seconds)",
    )
    cleanup_interval_minutes: int = Field(
        default=60,
        alias="RETRY_CLEANUP_INTERVAL_MINUTES",
        description="How often the scheduler runs queue cleanup (minutes)",
    )
