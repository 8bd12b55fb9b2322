"""Builders for response envelopes and request ids."""

import secrets
import string
import time
from typing import Any, Dict, Optional

from infrastructure.commands.errors import DEFAULT_MESSAGES, CommandError, ErrorCode
from infrastructure.models import ErrorDetail, ErrorEnvelope, SuccessEnvelope

_ALPHANUMERIC = string.ascii_letters + string.digits


def generate_request_id(now: Optional[float] = None) -> str:
    """Opaque request id: ``req_<13 hex chars>_<8 alphanumerics>``.

    The hex part encodes the current time (seconds and microseconds).
    """
    now = time.time() if now is None else now
    seconds = int(now)
    micros = int((now - seconds) * 1_000_000)
    suffix = "".join(secrets.choice(_ALPHANUMERIC) for _ in range(8))
    return f"req_{seconds:08x}{micros:05x}_{suffix}"


def success_envelope(
    data: Any, request_id: str, execution_time_ms: float, now: Optional[float] = None
) -> SuccessEnvelope:
    return SuccessEnvelope(
        data=data,
        request_id=request_id,
        timestamp=int(time.time() if now is None else now),
        execution_time_ms=round(max(execution_time_ms, 0.0), 2),
    )


def error_envelope(
    code: ErrorCode,
    request_id: str,
    message: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    now: Optional[float] = None,
) -> ErrorEnvelope:
    return ErrorEnvelope(
        error=ErrorDetail(
            code=code.value,
            message=message or DEFAULT_MESSAGES[code],
            data=data,
        ),
        request_id=request_id,
        timestamp=int(time.time() if now is None else now),
    )


def envelope_from_error(
    error: CommandError, request_id: str, now: Optional[float] = None
) -> ErrorEnvelope:
    return error_envelope(error.code, request_id, error.message, error.data, now)


def store_error_envelope(
    request_id: str, data: Optional[Dict[str, Any]] = None
) -> ErrorEnvelope:
    """``request_failed`` caused by the key-value store being unavailable."""
    return error_envelope(
        ErrorCode.REQUEST_FAILED,
        request_id,
        data={**(data or {}), "reason": "store_error"},
    )
