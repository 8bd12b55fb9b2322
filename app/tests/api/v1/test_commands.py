"""Tests for the command endpoints."""

import pytest

from infrastructure.commands import TransientError


def fetch_token(api_client, action, headers=None):
    response = api_client.post(f"/api/v1/commands/tokens/{action}", headers=headers)
    assert response.status_code == 200
    return response.json()["token"]


class TestDispatchEndpoint:
    """Tests for POST /commands/{action}."""

    def test_anonymous_ping(self, api_client):
        token = fetch_token(api_client, "ping")

        response = api_client.post("/api/v1/commands/ping", json={"token": token})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"]["pong"] is True
        assert body["request_id"].startswith("req_")

    def test_save_settings_as_admin(self, api_client, auth_headers, admin_actor):
        headers = auth_headers(admin_actor)
        token = fetch_token(api_client, "save_settings", headers)

        response = api_client.post(
            "/api/v1/commands/save_settings",
            json={"payload": {"menu_font_size": 18}, "token": token},
            headers=headers,
        )

        body = response.json()
        assert body["success"] is True
        assert body["data"]["settings"]["menu_font_size"] == 18

    def test_errors_use_http_200(self, api_client, auth_headers, admin_actor):
        """Test that command failures are reported in the envelope, not the status."""
        response = api_client.post(
            "/api/v1/commands/save_settings",
            json={"payload": {"menu_font_size": 18}, "token": "forged"},
            headers=auth_headers(admin_actor),
        )

        assert response.status_code == 200
        assert response.json()["error"]["code"] == "invalid_token"
        assert "data" not in response.json()["error"]

    def test_invalid_payload(self, api_client, auth_headers, admin_actor):
        headers = auth_headers(admin_actor)
        token = fetch_token(api_client, "save_settings", headers)

        response = api_client.post(
            "/api/v1/commands/save_settings",
            json={"payload": {"menu_font_size": 99}, "token": token},
            headers=headers,
        )

        error = response.json()["error"]
        assert error["code"] == "invalid_payload"
        assert "menu_font_size" in error["data"]["fields"]

    def test_unknown_action(self, api_client):
        response = api_client.post("/api/v1/commands/nope", json={})

        assert response.json()["error"]["code"] == "unknown_action"

    def test_invalid_session_is_401(self, api_client):
        response = api_client.post(
            "/api/v1/commands/ping",
            json={},
            headers={"Authorization": "Bearer not-a-session"},
        )

        assert response.status_code == 401


class TestTokenEndpoint:
    """Tests for POST /commands/tokens/{action}."""

    def test_token_response(self, api_client, registered_service):
        response = api_client.post("/api/v1/commands/tokens/ping")

        body = response.json()
        assert body["action"] == "ping"
        assert body["expires_in"] == registered_service.tokens.ttl_seconds

    def test_unknown_action_is_404(self, api_client):
        assert api_client.post("/api/v1/commands/tokens/nope").status_code == 404

    def test_anonymous_admin_action_is_403(self, api_client):
        response = api_client.post("/api/v1/commands/tokens/save_settings")

        assert response.status_code == 403


class TestQueueEndpoints:
    """Tests for retry, status and statistics endpoints."""

    @pytest.fixture
    def queued_ticket(self, registered_service):
        """Queue one failed save_settings request and return its ticket id."""
        registered_service.queue.enqueue(
            "req_0000000000000_abcdefgh", "save_settings", {"menu_font_size": 18}
        )
        return "req_0000000000000_abcdefgh"

    def test_status(self, api_client, auth_headers, admin_actor, queued_ticket):
        headers = auth_headers(admin_actor)
        token = fetch_token(api_client, "get_status", headers)

        response = api_client.get(
            f"/api/v1/commands/requests/{queued_ticket}/status",
            params={"token": token},
            headers=headers,
        )

        assert response.json()["data"]["status"] == "queued"

    def test_retry(self, api_client, auth_headers, admin_actor, queued_ticket):
        headers = auth_headers(admin_actor)
        token = fetch_token(api_client, "retry_request", headers)

        response = api_client.post(
            f"/api/v1/commands/requests/{queued_ticket}/retry",
            json={"token": token},
            headers=headers,
        )

        body = response.json()
        assert body["success"] is True
        assert body["data"]["settings"]["menu_font_size"] == 18

    def test_retry_requires_token(self, api_client, auth_headers, admin_actor):
        response = api_client.post(
            "/api/v1/commands/requests/req_x/retry",
            json={},
            headers=auth_headers(admin_actor),
        )

        assert response.json()["error"]["code"] == "invalid_token"

    def test_stats_for_admin(
        self, api_client, auth_headers, admin_actor, queued_ticket
    ):
        response = api_client.get(
            "/api/v1/commands/queue/stats", headers=auth_headers(admin_actor)
        )

        body = response.json()
        assert response.status_code == 200
        assert body["queued_requests"] == 1
        assert body["registered_handlers"] == 4

    def test_stats_forbidden_for_others(
        self, api_client, auth_headers, subscriber_actor
    ):
        response = api_client.get(
            "/api/v1/commands/queue/stats", headers=auth_headers(subscriber_actor)
        )

        assert response.status_code == 403

    def test_failed_dispatch_reports_ticket(
        self, api_client, registered_service, auth_headers, admin_actor
    ):
        """Test that a retryable failure surfaces its ticket id to the client."""
        handlers = registered_service.registry.get("save_settings").handler.__self__
        original_save = handlers.repository.save

        def failing_save(updates):
            raise TransientError("storage unavailable")

        handlers.repository.save = failing_save
        headers = auth_headers(admin_actor)
        token = fetch_token(api_client, "save_settings", headers)

        try:
            response = api_client.post(
                "/api/v1/commands/save_settings",
                json={"payload": {"menu_font_size": 18}, "token": token},
                headers=headers,
            )
        finally:
            handlers.repository.save = original_save

        error = response.json()["error"]
        assert error["code"] == "request_failed"
        assert error["data"]["retry_queued"] is True
        assert error["data"]["ticket_id"] == response.json()["request_id"]
