"""Factory for creating retry ticket stores based on configuration."""

from infrastructure.logging import get_module_logger
from infrastructure.persistence import KeyValueStore
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.store import (
    KeyValueRetryTicketStore,
    RetryTicketStore,
)

logger = get_module_logger()


def create_retry_store(
    kv_store: KeyValueStore, config: RetryConfig | None = None
) -> RetryTicketStore:
    """Factory to create the retry ticket store.

    Args:
        kv_store: Shared key-value store holding the queue document
        config: RetryConfig naming the queue key. If None, uses defaults.

    Returns:
        RetryTicketStore implementation
    """
    config = config or RetryConfig()
    logger.info("creating_retry_ticket_store", queue_key=config.queue_key)
    return KeyValueRetryTicketStore(kv_store, queue_key=config.queue_key)
