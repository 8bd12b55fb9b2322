"""Command dispatcher.

Single synchronous entry point from the presentation layer to the handlers.
Every outcome, including unexpected failures, is returned as a response
envelope; nothing raised below this boundary reaches the caller.
"""

import time
from typing import Any, Dict, List, Optional

from infrastructure.commands.admission import AdmissionGate
from infrastructure.commands.envelope import (
    envelope_from_error,
    error_envelope,
    generate_request_id,
    success_envelope,
)
from infrastructure.commands.errors import (
    CapacityError,
    CommandError,
    ErrorCode,
    SecurityError,
    TransientError,
    ValidationError,
)
from infrastructure.commands.execution import HandlerExecutor, handler_running
from infrastructure.commands.models import HandlerRegistration, RequestEnvelope
from infrastructure.commands.registry import HandlerRegistry
from infrastructure.commands.sanitize import decode_payload
from infrastructure.logging import get_module_logger
from infrastructure.models import ErrorEnvelope, SuccessEnvelope
from infrastructure.persistence import StoreError
from infrastructure.resilience.retry import QueueProcessor

logger = get_module_logger()


class Dispatcher:
    """Admits, decodes and executes one command per call.

    Attributes:
        registry: HandlerRegistry resolving actions
        gate: AdmissionGate run before any handler
        queue: QueueProcessor receiving retryable failures
        executor: HandlerExecutor enforcing timeouts
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        gate: AdmissionGate,
        queue: QueueProcessor,
        executor: HandlerExecutor | None = None,
    ):
        self.registry = registry
        self.gate = gate
        self.queue = queue
        self.executor = executor or HandlerExecutor()
        self.log = logger.bind(component="dispatcher")

    def dispatch(self, request: RequestEnvelope) -> SuccessEnvelope | ErrorEnvelope:
        """Run one request through admission, decoding and its handler.

        Args:
            request: The incoming call

        Returns:
            SuccessEnvelope or ErrorEnvelope
        """
        request_id = generate_request_id()

        if handler_running():
            self.log.error(
                "dispatch_reentrant_rejected",
                action=request.action,
                request_id=request_id,
            )
            return error_envelope(
                ErrorCode.REQUEST_FAILED,
                request_id,
                message="Commands cannot be dispatched from within a handler",
            )

        try:
            return self._dispatch(request, request_id)
        except Exception as e:  # pylint: disable=broad-except
            self.log.error(
                "dispatch_unexpected_error",
                action=request.action,
                actor_id=request.actor.actor_id,
                request_id=request_id,
                error=str(e),
                exc_info=True,
            )
            return error_envelope(ErrorCode.REQUEST_FAILED, request_id)

    def _dispatch(
        self, request: RequestEnvelope, request_id: str
    ) -> SuccessEnvelope | ErrorEnvelope:
        log = self.log.bind(
            action=request.action,
            actor_id=request.actor.actor_id,
            request_id=request_id,
        )

        registration = self.registry.get(request.action)
        if registration is None:
            log.warning("dispatch_unknown_action")
            return envelope_from_error(
                ValidationError(code=ErrorCode.UNKNOWN_ACTION), request_id
            )

        decision = self.gate.admit_registration(
            registration, request.token, request.actor
        )
        if not decision.allowed:
            log.warning(
                "dispatch_denied", status="denied", reason=decision.reason.value
            )
            data = (
                {"retry_after": decision.retry_after} if decision.retry_after else None
            )
            return envelope_from_error(
                SecurityError(code=decision.reason, data=data), request_id
            )

        try:
            payload = decode_payload(registration, request.payload)
        except ValidationError as e:
            log.info(
                "dispatch_invalid_payload",
                status="invalid",
                fields=_field_names(request.payload),
            )
            return envelope_from_error(e, request_id)

        started = time.perf_counter()
        try:
            result = self.executor.run(registration, payload)
        except CommandError as e:
            failure = e
        except Exception as e:  # pylint: disable=broad-except
            log.warning("dispatch_handler_exception", error=str(e), exc_info=True)
            failure = TransientError()
        else:
            execution_time_ms = (time.perf_counter() - started) * 1000
            log.info(
                "dispatch_succeeded",
                status="success",
                execution_time_ms=round(execution_time_ms, 2),
                fields=_field_names(payload),
            )
            return success_envelope(result, request_id, execution_time_ms)

        execution_time_ms = (time.perf_counter() - started) * 1000
        return self._handle_failure(
            registration, payload, request_id, failure, execution_time_ms, log
        )

    def _handle_failure(
        self,
        registration: HandlerRegistration,
        payload: Dict[str, Any],
        request_id: str,
        failure: CommandError,
        execution_time_ms: float,
        log,
    ) -> ErrorEnvelope:
        if not failure.retryable:
            log.warning(
                "dispatch_failed",
                status="failed",
                code=failure.code.value,
                execution_time_ms=round(execution_time_ms, 2),
                fields=_field_names(payload),
            )
            return envelope_from_error(failure, request_id)

        data: Dict[str, Any] = dict(failure.data or {})
        data["retry_queued"] = False
        data["ticket_id"] = None

        if registration.retry_enabled:
            reason = self._enqueue(registration, payload, request_id, log)
            if reason is None:
                data["retry_queued"] = True
                data["ticket_id"] = request_id
            else:
                data["reason"] = reason

        log.warning(
            "dispatch_failed",
            status="failed",
            code=failure.code.value,
            retry_queued=data["retry_queued"],
            execution_time_ms=round(execution_time_ms, 2),
            fields=_field_names(payload),
        )
        return error_envelope(
            ErrorCode.REQUEST_FAILED, request_id, failure.message, data
        )

    def _enqueue(
        self,
        registration: HandlerRegistration,
        payload: Dict[str, Any],
        request_id: str,
        log,
    ) -> Optional[str]:
        """Queue a retry ticket; return the rejection reason, or None when queued."""
        try:
            self.queue.enqueue(request_id, registration.action, payload)
        except CapacityError as e:
            log.warning("retry_not_queued", reason=e.code.value)
            return e.code.value
        except StoreError as e:
            log.error("retry_not_queued", reason="store_error", error=str(e))
            return "store_error"
        return None


def _field_names(payload: Any) -> List[str]:
    if isinstance(payload, dict):
        return sorted(str(key) for key in payload)
    return []
