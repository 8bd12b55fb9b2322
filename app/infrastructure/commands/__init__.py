"""Command admission, dispatch and handler registration.

This package provides:
- HandlerRegistry: Explicit table of actions and their handlers
- AdmissionGate: Anti-forgery token, capability and rate limit checks
- Dispatcher: Runs admitted commands and builds response envelopes
- CommandService: Composition root wiring the above with the retry queue

Example:
    from infrastructure.commands import HandlerRegistry
    from infrastructure.commands.service import CommandService

    service = CommandService.from_settings(settings)

    @service.registry.handler("ping", allow_anonymous=True, retry_enabled=False)
    def ping(payload: dict) -> dict:
        return {"pong": True}

    envelope = service.dispatch("ping", {}, token, actor)

The dispatcher and service depend on the retry queue and are imported from
their modules directly.
"""

from infrastructure.commands.admission import AdmissionGate
from infrastructure.commands.config import DispatchConfig
from infrastructure.commands.errors import (
    CapacityError,
    CommandError,
    ErrorCode,
    ExhaustionError,
    SecurityError,
    TransientError,
    ValidationError,
)
from infrastructure.commands.execution import HandlerExecutor
from infrastructure.commands.models import (
    AdmissionDecision,
    HandlerRegistration,
    RequestEnvelope,
)
from infrastructure.commands.rate_limiter import RateLimiter
from infrastructure.commands.registry import HandlerRegistry
from infrastructure.commands.sanitize import decode_payload, sanitize_payload

__all__ = [
    # Errors
    "CapacityError",
    "CommandError",
    "ErrorCode",
    "ExhaustionError",
    "SecurityError",
    "TransientError",
    "ValidationError",
    # Models
    "AdmissionDecision",
    "HandlerRegistration",
    "RequestEnvelope",
    # Core
    "AdmissionGate",
    "DispatchConfig",
    "HandlerExecutor",
    "HandlerRegistry",
    "RateLimiter",
    "decode_payload",
    "sanitize_payload",
]
