"""Resilience patterns and implementations.

This module contains the retry queue used to re-attempt failed commands.
"""

from infrastructure.resilience.retry import (
    KeyValueRetryTicketStore,
    QueueProcessor,
    RetryConfig,
    RetryTicket,
    RetryTicketStore,
    create_retry_store,
)

__all__ = [
    "KeyValueRetryTicketStore",
    "QueueProcessor",
    "RetryConfig",
    "RetryTicket",
    "RetryTicketStore",
    "create_retry_store",
]
