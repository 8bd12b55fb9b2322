"""Retry queue for failed command requests.

A retryable handler failure becomes a RetryTicket persisted in the shared
key-value store. The QueueProcessor re-attempts due tickets with exponential
backoff until they succeed, are exhausted, or age out.

Architecture:
- RetryTicket: Persisted record of one failed request
- RetryTicketStore: Storage interface (one queue document per key-value store)
- QueueProcessor: Sweep, manual retry, status, cleanup and statistics
- RetryConfig: Backoff, bounds and retention

Usage:
    from infrastructure.resilience.retry import (
        QueueProcessor,
        RetryConfig,
        create_retry_store,
    )

    config = RetryConfig(max_retries=3, base_delay_ms=1000)
    processor = QueueProcessor(create_retry_store(kv_store, config), registry, config)

    processor.process_queue()
"""

from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.factory import create_retry_store
from infrastructure.resilience.retry.models import RetryTicket
from infrastructure.resilience.retry.store import (
    KeyValueRetryTicketStore,
    RetryTicketStore,
)
from infrastructure.resilience.retry.worker import QueueProcessor

__all__ = [
    # Models
    "RetryTicket",
    # Configuration
    "RetryConfig",
    # Store
    "RetryTicketStore",
    "KeyValueRetryTicketStore",
    # Processor
    "QueueProcessor",
    # Factory
    "create_retry_store",
]
