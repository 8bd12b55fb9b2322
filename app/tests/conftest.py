"""Shared fixtures for the command service test suite."""

import pytest

from infrastructure.commands.config import DispatchConfig
from infrastructure.commands.service import CommandService
from infrastructure.persistence import InMemoryKeyValueStore
from infrastructure.resilience.retry import RetryConfig
from infrastructure.security import Actor, SessionManager, TokenManager

TEST_SECRET_KEY = "test-signing-key-with-enough-length-for-hs256"
START_TIME = 1_700_000_000.0


class FakeClock:
    """Deterministic time source; call it like time.time()."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv_store(clock):
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def token_manager(clock):
    return TokenManager(secret_key=TEST_SECRET_KEY, ttl_seconds=3600, clock=clock)


@pytest.fixture
def session_manager(clock):
    return SessionManager(secret_key=TEST_SECRET_KEY, ttl_seconds=3600, clock=clock)


@pytest.fixture
def admin_actor():
    return Actor(actor_id="1", capabilities=frozenset({"manage_options", "read"}))


@pytest.fixture
def subscriber_actor():
    return Actor(actor_id="2", capabilities=frozenset({"read"}))


@pytest.fixture
def anonymous_actor():
    return Actor.anonymous("203.0.113.7")


@pytest.fixture
def command_service_factory(kv_store, token_manager, clock):
    """Factory for CommandService instances sharing the test store and clock."""
    services = []

    def _factory(
        dispatch_config: DispatchConfig | None = None,
        retry_config: RetryConfig | None = None,
    ) -> CommandService:
        service = CommandService(
            kv_store=kv_store,
            tokens=token_manager,
            dispatch_config=dispatch_config or DispatchConfig(timeout_s=5),
            retry_config=retry_config or RetryConfig(),
            clock=clock,
        )
        services.append(service)
        return service

    yield _factory

    for service in services:
        service.shutdown()


@pytest.fixture
def command_service(command_service_factory):
    return command_service_factory()
