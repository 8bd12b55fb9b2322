"""Closed error taxonomy for command dispatch.

Handlers raise these (or any exception, which is treated as a transient
failure) and the dispatcher maps them to an error envelope. Error codes are
never free-form strings.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes surfaced in error envelopes."""

    INVALID_TOKEN = "invalid_token"
    INSUFFICIENT_AUTHORIZATION = "insufficient_authorization"
    RATE_LIMITED = "rate_limited"
    INVALID_PAYLOAD = "invalid_payload"
    UNKNOWN_ACTION = "unknown_action"
    NOT_FOUND = "not_found"
    REQUEST_FAILED = "request_failed"
    MAX_RETRIES_REACHED = "max_retries_reached"
    QUEUE_FULL = "queue_full"


DEFAULT_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.INVALID_TOKEN: "Security verification failed. Please refresh the page and try again.",
    ErrorCode.INSUFFICIENT_AUTHORIZATION: "You do not have permission to perform this action.",
    ErrorCode.RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ErrorCode.INVALID_PAYLOAD: "The submitted data is invalid.",
    ErrorCode.UNKNOWN_ACTION: "Unknown action.",
    ErrorCode.NOT_FOUND: "Request not found in retry queue.",
    ErrorCode.REQUEST_FAILED: "The request failed.",
    ErrorCode.MAX_RETRIES_REACHED: "Maximum retry attempts reached. Please try again later.",
    ErrorCode.QUEUE_FULL: "Retry queue is full.",
}


class CommandError(Exception):
    """Base class for failures mapped to an error envelope.

    Attributes:
        code: ErrorCode for the envelope
        message: Human-readable message
        data: Optional structured details (field errors, ticket ids, ...)
    """

    default_code = ErrorCode.REQUEST_FAILED
    retryable = False

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message or DEFAULT_MESSAGES[self.code]
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code.value!r}, "
            f"message={self.message!r})"
        )


class SecurityError(CommandError):
    """Admission failure (token, authorization, rate limit). Always terminal."""

    default_code = ErrorCode.INVALID_TOKEN


class ValidationError(CommandError):
    """Payload or lookup failure. Never retried."""

    default_code = ErrorCode.INVALID_PAYLOAD


class TransientError(CommandError):
    """Handler failure that may succeed on a later attempt."""

    default_code = ErrorCode.REQUEST_FAILED
    retryable = True


class ExhaustionError(CommandError):
    """A retry ticket has used all of its attempts."""

    default_code = ErrorCode.MAX_RETRIES_REACHED


class CapacityError(CommandError):
    """The retry queue is at capacity."""

    default_code = ErrorCode.QUEUE_FULL
