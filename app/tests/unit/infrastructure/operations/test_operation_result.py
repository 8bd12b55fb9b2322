"""Unit tests for OperationResult."""

import dataclasses

import pytest

from infrastructure.operations import OperationResult, OperationStatus


class TestOperationResult:
    """Tests for OperationResult factories and properties."""

    def test_success(self):
        result = OperationResult.success(data={"a": 1})

        assert result.is_success is True
        assert result.is_transient is False
        assert result.data == {"a": 1}
        assert result.message == "ok"

    def test_transient_error(self):
        result = OperationResult.transient_error("timeout", error_code="TIMEOUT")

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.is_success is False
        assert result.is_transient is True
        assert result.error_code == "TIMEOUT"

    def test_permanent_error(self):
        result = OperationResult.permanent_error("bad data", key="queue")

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.is_transient is False
        assert result.key == "queue"

    def test_results_are_immutable(self):
        result = OperationResult.success()

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.message = "changed"

    def test_log_fields_skip_missing_values(self):
        assert OperationResult.success().log_fields() == {"status": "success"}

    def test_log_fields_include_code_and_key(self):
        result = OperationResult.transient_error(
            "down", error_code="CONNECTION_ERROR", key="las:queue"
        )

        assert result.log_fields() == {
            "status": "transient_error",
            "error_code": "CONNECTION_ERROR",
            "key": "las:queue",
        }
