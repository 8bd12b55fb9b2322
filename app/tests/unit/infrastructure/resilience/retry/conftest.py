"""Fixtures for retry queue unit tests."""

import pytest

from infrastructure.commands import HandlerExecutor, HandlerRegistry
from infrastructure.resilience.retry import (
    KeyValueRetryTicketStore,
    QueueProcessor,
    RetryConfig,
    RetryTicket,
)


@pytest.fixture
def retry_store(kv_store):
    return KeyValueRetryTicketStore(kv_store, queue_key="test_queue")


@pytest.fixture
def ticket_factory(clock):
    """Factory for RetryTicket instances."""

    def _factory(ticket_id="req_1", action="save_settings", **overrides):
        values = {
            "payload": {"menu_text_color": "#ffffff"},
            "attempts": 0,
            "next_retry": clock.now,
            "created": clock.now,
        }
        values.update(overrides)
        return RetryTicket(id=ticket_id, action=action, **values)

    return _factory


@pytest.fixture
def handler_registry():
    return HandlerRegistry()


@pytest.fixture
def processor(retry_store, handler_registry, clock):
    executor = HandlerExecutor(max_workers=2)
    processor = QueueProcessor(
        retry_store, handler_registry, RetryConfig(), executor=executor, clock=clock
    )
    yield processor
    executor.shutdown(wait=False)
