"""Unit tests for CommandService."""

import pytest

from infrastructure.commands import (
    DispatchConfig,
    ErrorCode,
    SecurityError,
    TransientError,
    ValidationError,
)
from infrastructure.commands.service import RETRY_ACTION, STATUS_ACTION, CommandService
from infrastructure.configuration import Settings
from infrastructure.configuration.infrastructure import SecuritySettings
from infrastructure.operations import OperationResult
from infrastructure.persistence import InMemoryKeyValueStore, StoreError
from infrastructure.resilience.retry import RetryConfig


@pytest.fixture
def failing_service(command_service):
    """Service with one handler that always fails transiently."""
    calls = {"count": 0}

    def flaky(payload):
        calls["count"] += 1
        if calls.get("succeed"):
            return {"ok": True}
        raise TransientError()

    command_service.registry.register("flaky", flaky)
    command_service.calls = calls
    return command_service


def _store_down(*args, **kwargs):
    raise StoreError(
        OperationResult.transient_error("down", error_code="CONNECTION_ERROR")
    )


def queue_failure(service, actor):
    envelope = service.dispatch(
        "flaky", {"name": "x"}, service.tokens.issue("flaky", actor.actor_id), actor
    )
    return envelope.error.data["ticket_id"]


class TestCommandService:
    """Tests for CommandService composition and operations."""

    def test_dispatch_round_trip(self, command_service, admin_actor):
        command_service.registry.register("echo", lambda payload: payload)
        token = command_service.tokens.issue("echo", admin_actor.actor_id)

        envelope = command_service.dispatch("echo", {"a": "b"}, token, admin_actor)

        assert envelope.success is True
        assert envelope.data == {"a": "b"}

    def test_dispatch_none_payload(self, command_service, admin_actor):
        command_service.registry.register("echo", lambda payload: payload)
        token = command_service.tokens.issue("echo", admin_actor.actor_id)

        assert command_service.dispatch("echo", None, token, admin_actor).data == {}

    def test_registry_uses_dispatch_defaults(self, command_service_factory):
        service = command_service_factory(
            dispatch_config=DispatchConfig(timeout_s=7, default_capability="edit")
        )

        registration = service.registry.register("a", lambda payload: None)

        assert registration.timeout == 7
        assert registration.capability == "edit"

    def test_retry_requires_retry_token(self, failing_service, admin_actor):
        """Test that a token for another action cannot drive a manual retry."""
        ticket_id = queue_failure(failing_service, admin_actor)
        token = failing_service.tokens.issue("flaky", admin_actor.actor_id)

        envelope = failing_service.retry(ticket_id, token, admin_actor)

        assert envelope.code == "invalid_token"

    def test_retry_requires_admin(self, failing_service, admin_actor, subscriber_actor):
        ticket_id = queue_failure(failing_service, admin_actor)
        token = failing_service.tokens.issue(RETRY_ACTION, subscriber_actor.actor_id)

        envelope = failing_service.retry(ticket_id, token, subscriber_actor)

        assert envelope.code == "insufficient_authorization"

    def test_retry_blank_ticket_id(self, command_service, admin_actor):
        token = command_service.tokens.issue(RETRY_ACTION, admin_actor.actor_id)

        envelope = command_service.retry("  ", token, admin_actor)

        assert envelope.code == "invalid_payload"
        assert envelope.error.message == "Invalid request ID"

    def test_retry_success_removes_ticket(self, failing_service, admin_actor):
        ticket_id = queue_failure(failing_service, admin_actor)
        failing_service.calls["succeed"] = True
        token = failing_service.tokens.issue(RETRY_ACTION, admin_actor.actor_id)

        envelope = failing_service.retry(ticket_id, token, admin_actor)

        assert envelope.success is True
        assert envelope.data == {"ok": True}
        assert failing_service.queue.store.get(ticket_id) is None

    def test_status_reports_queued_ticket(self, failing_service, admin_actor):
        ticket_id = queue_failure(failing_service, admin_actor)
        token = failing_service.tokens.issue(STATUS_ACTION, admin_actor.actor_id)

        envelope = failing_service.status(ticket_id, token, admin_actor)

        assert envelope.success is True
        assert envelope.data["status"] == "queued"
        assert envelope.data["attempts"] == 0
        assert envelope.data["max_retries"] == 3

    def test_status_unknown_ticket_is_completed(self, command_service, admin_actor):
        token = command_service.tokens.issue(STATUS_ACTION, admin_actor.actor_id)

        envelope = command_service.status("req_missing", token, admin_actor)

        assert envelope.data == {"status": "completed"}

    def test_status_store_failure_returns_envelope(
        self, failing_service, admin_actor, monkeypatch
    ):
        token = failing_service.tokens.issue(STATUS_ACTION, admin_actor.actor_id)
        monkeypatch.setattr(failing_service.queue, "status", _store_down)

        envelope = failing_service.status("req_1", token, admin_actor)

        assert envelope.success is False
        assert envelope.code == "request_failed"
        assert envelope.error.data == {"ticket_id": "req_1", "reason": "store_error"}

    def test_retry_store_failure_during_admission_returns_envelope(
        self, failing_service, admin_actor, monkeypatch
    ):
        token = failing_service.tokens.issue(RETRY_ACTION, admin_actor.actor_id)
        monkeypatch.setattr(failing_service.gate, "admit", _store_down)

        envelope = failing_service.retry("req_1", token, admin_actor)

        assert envelope.code == "request_failed"
        assert envelope.error.data["reason"] == "store_error"

    def test_process_queue_delegates_to_processor(
        self, failing_service, admin_actor, clock
    ):
        queue_failure(failing_service, admin_actor)
        failing_service.calls["succeed"] = True
        clock.advance(2)

        stats = failing_service.process_queue()

        assert stats["succeeded"] == 1
        assert failing_service.queue.store.count() == 0

    def test_clear_queue(self, failing_service, admin_actor):
        queue_failure(failing_service, admin_actor)
        queue_failure(failing_service, admin_actor)

        failing_service.clear_queue()

        assert failing_service.queue.store.count() == 0

    def test_cleanup_removes_old_tickets(self, failing_service, admin_actor, clock):
        queue_failure(failing_service, admin_actor)
        clock.advance(24 * 3600 + 1)

        assert failing_service.cleanup() == 1

    def test_statistics_include_dispatch_configuration(
        self, failing_service, admin_actor
    ):
        queue_failure(failing_service, admin_actor)

        stats = failing_service.statistics()

        assert stats["registered_handlers"] == 1
        assert stats["queued_requests"] == 1
        assert stats["configuration"]["timeout_s"] == 5
        assert stats["configuration"]["rate_limit_per_window"] == 60
        assert stats["configuration"]["max_retries"] == 3

    def test_issue_token_for_registered_action(self, command_service, admin_actor):
        command_service.registry.register("echo", lambda payload: payload)

        token = command_service.issue_token("echo", admin_actor)

        assert command_service.tokens.validate(token, "echo", admin_actor.actor_id)

    def test_issue_token_unknown_action(self, command_service, admin_actor):
        with pytest.raises(ValidationError) as exc_info:
            command_service.issue_token("missing", admin_actor)

        assert exc_info.value.code == ErrorCode.UNKNOWN_ACTION

    def test_issue_token_anonymous_needs_anonymous_action(
        self, command_service, anonymous_actor
    ):
        command_service.registry.register("private", lambda payload: None)
        command_service.registry.register(
            "public", lambda payload: None, allow_anonymous=True
        )

        with pytest.raises(SecurityError):
            command_service.issue_token("private", anonymous_actor)
        assert command_service.issue_token("public", anonymous_actor)

    def test_issue_token_queue_actions_need_admin(
        self, command_service, admin_actor, subscriber_actor
    ):
        assert command_service.issue_token(RETRY_ACTION, admin_actor)
        with pytest.raises(SecurityError):
            command_service.issue_token(STATUS_ACTION, subscriber_actor)

    def test_from_settings(self, clock):
        settings = Settings(
            security=SecuritySettings(SECURITY_TOKEN_SECRET_KEY="k" * 40)
        )
        service = CommandService.from_settings(
            settings, kv_store=InMemoryKeyValueStore(), clock=clock
        )
        try:
            assert service.retry_config == RetryConfig.from_settings(settings)
            assert service.dispatch_config.window_s == settings.dispatch.window_s
            assert service.tokens.ttl_seconds == settings.security.token_ttl_seconds
        finally:
            service.shutdown()
