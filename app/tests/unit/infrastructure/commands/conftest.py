"""Fixtures for command core unit tests."""

import pytest

from infrastructure.commands import (
    AdmissionGate,
    HandlerExecutor,
    HandlerRegistry,
    RateLimiter,
)
from infrastructure.commands.dispatcher import Dispatcher
from infrastructure.resilience.retry import (
    KeyValueRetryTicketStore,
    QueueProcessor,
    RetryConfig,
)


@pytest.fixture
def registry():
    return HandlerRegistry()


@pytest.fixture
def executor():
    executor = HandlerExecutor(max_workers=2)
    yield executor
    executor.shutdown(wait=False)


@pytest.fixture
def rate_limiter(kv_store, clock):
    return RateLimiter(kv_store, limit=3, window_s=60, clock=clock)


@pytest.fixture
def gate(token_manager, rate_limiter):
    return AdmissionGate(token_manager, rate_limiter)


@pytest.fixture
def ticket_store(kv_store):
    return KeyValueRetryTicketStore(kv_store)


@pytest.fixture
def queue(ticket_store, registry, executor, clock):
    return QueueProcessor(
        ticket_store, registry, RetryConfig(), executor=executor, clock=clock
    )


@pytest.fixture
def dispatcher(registry, gate, queue, executor):
    return Dispatcher(registry, gate, queue, executor=executor)
