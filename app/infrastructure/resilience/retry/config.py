"""Retry queue configuration.

This module defines configuration for retry ticket scheduling and queue bounds.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry queue behavior.

    Attributes:
        max_retries: Attempts after which a ticket is abandoned
        base_delay_ms: Base delay for exponential backoff (first retry)
        max_delay_ms: Maximum delay between retries (cap for exponential backoff)
        queue_size_max: Maximum number of queued tickets
        retention_h: Age after which a ticket is removed regardless of attempts
        queue_key: Key holding the queue document in the key-value store

    Example:
        # Default configuration
        config = RetryConfig()

        # Custom configuration
        config = RetryConfig(max_retries=5, base_delay_ms=500, queue_size_max=10)
    """

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    queue_size_max: int = 100
    retention_h: int = 24
    queue_key: str = "command_retry_queue"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.base_delay_ms < 1:
            raise ValueError("base_delay_ms must be at least 1")
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        if self.queue_size_max < 1:
            raise ValueError("queue_size_max must be at least 1")
        if self.retention_h < 1:
            raise ValueError("retention_h must be at least 1")
        if not self.queue_key:
            raise ValueError("queue_key is required")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RetryConfig":
        retry = settings.retry
        return cls(
            max_retries=retry.max_retries,
            base_delay_ms=retry.base_delay_ms,
            max_delay_ms=retry.max_delay_ms,
            queue_size_max=retry.queue_size_max,
            retention_h=retry.retention_h,
            queue_key=retry.queue_key,
        )

    @property
    def retention_seconds(self) -> int:
        return self.retention_h * 3600

    def backoff_seconds(self, attempts: int) -> float:
        """Delay before the next attempt once ``attempts`` attempts have failed.

        ``min(base_delay_ms * 2**attempts, max_delay_ms)`` converted to seconds.
        """
        delay_ms = min(self.base_delay_ms * (2**attempts), self.max_delay_ms)
        return delay_ms / 1000
