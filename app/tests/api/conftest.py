"""Fixtures for API route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import setup_rate_limiter
from api.v1.router import router as v1_router
from infrastructure.services import get_command_service, get_session_manager
from modules.settings.handlers import register
from modules.settings.repository import SettingsRepository


def create_test_app(routers, prefix: str = "") -> FastAPI:
    """Create a FastAPI test application with the given routers."""
    app = FastAPI()
    setup_rate_limiter(app)
    for router in routers:
        app.include_router(router, prefix=prefix)
    return app


@pytest.fixture
def registered_service(command_service, kv_store):
    """Command service with the settings feature registered."""
    register(command_service.registry, SettingsRepository(kv_store))
    command_service.registry.seal()
    return command_service


@pytest.fixture
def api_client(registered_service, session_manager):
    app = create_test_app([v1_router], prefix="/api/v1")
    app.dependency_overrides[get_command_service] = lambda: registered_service
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(session_manager):
    """Factory for bearer headers carrying a session for an actor."""

    def _headers(actor):
        return {"Authorization": f"Bearer {session_manager.issue(actor)}"}

    return _headers
