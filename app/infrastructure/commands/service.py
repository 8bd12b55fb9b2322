"""Command service for dependency injection.

Composition root of the command core: owns the handler registry and wires
the rate limiter, admission gate, dispatcher and queue processor around one
shared key-value store.
"""

import time
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from infrastructure.commands.admission import AdmissionGate
from infrastructure.commands.config import DispatchConfig
from infrastructure.commands.dispatcher import Dispatcher
from infrastructure.commands.envelope import (
    envelope_from_error,
    generate_request_id,
    store_error_envelope,
    success_envelope,
)
from infrastructure.commands.errors import ErrorCode, SecurityError, ValidationError
from infrastructure.commands.execution import HandlerExecutor
from infrastructure.commands.models import RequestEnvelope
from infrastructure.commands.rate_limiter import RateLimiter
from infrastructure.commands.registry import HandlerRegistry
from infrastructure.logging import get_module_logger
from infrastructure.models import ErrorEnvelope, SuccessEnvelope
from infrastructure.persistence import KeyValueStore, StoreError, create_kv_store
from infrastructure.resilience.retry import (
    QueueProcessor,
    RetryConfig,
    create_retry_store,
)
from infrastructure.security import Actor, TokenManager

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

RETRY_ACTION = "retry_request"
STATUS_ACTION = "get_status"


class CommandService:
    """Centralized command service for the application.

    Usage:
        # Via dependency injection
        from infrastructure.services import CommandServiceDep

        @router.post("/commands/{action}")
        def dispatch(action: str, body: CommandRequest, service: CommandServiceDep):
            return service.dispatch(action, body.payload, body.token, actor).to_dict()

        # Direct instantiation
        service = CommandService.from_settings(settings)
        service.registry.register("ping", lambda payload: "pong")
        envelope = service.dispatch("ping", {}, token, actor)
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        tokens: TokenManager,
        registry: Optional[HandlerRegistry] = None,
        dispatch_config: Optional[DispatchConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.dispatch_config = dispatch_config or DispatchConfig()
        self.retry_config = retry_config or RetryConfig()
        self.kv_store = kv_store
        self.tokens = tokens
        self.registry = registry or HandlerRegistry(
            default_capability=self.dispatch_config.default_capability,
            default_timeout=self.dispatch_config.timeout_s,
        )

        self.executor = HandlerExecutor(max_workers=self.dispatch_config.max_workers)
        self.rate_limiter = RateLimiter(
            kv_store,
            limit=self.dispatch_config.rate_limit_per_window,
            window_s=self.dispatch_config.window_s,
            clock=clock,
        )
        self.gate = AdmissionGate(tokens, self.rate_limiter)
        self.queue = QueueProcessor(
            create_retry_store(kv_store, self.retry_config),
            self.registry,
            self.retry_config,
            executor=self.executor,
            clock=clock,
        )
        self.dispatcher = Dispatcher(
            self.registry, self.gate, self.queue, executor=self.executor
        )
        self.log = logger.bind(component="command_service")

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        kv_store: Optional[KeyValueStore] = None,
        registry: Optional[HandlerRegistry] = None,
        clock: Callable[[], float] = time.time,
    ) -> "CommandService":
        return cls(
            kv_store=kv_store or create_kv_store(settings),
            tokens=TokenManager.from_settings(settings, clock=clock),
            registry=registry,
            dispatch_config=DispatchConfig.from_settings(settings),
            retry_config=RetryConfig.from_settings(settings),
            clock=clock,
        )

    def dispatch(
        self,
        action: str,
        payload: Optional[Dict[str, Any]],
        token: Optional[str],
        actor: Actor,
    ) -> SuccessEnvelope | ErrorEnvelope:
        """Single entry point for client-issued actions."""
        return self.dispatcher.dispatch(
            RequestEnvelope(
                action=action, payload=payload or {}, token=token, actor=actor
            )
        )

    def retry(
        self, ticket_id: str, token: Optional[str], actor: Actor
    ) -> SuccessEnvelope | ErrorEnvelope:
        """Admitted manual retry of a queued ticket."""
        try:
            denied = self._admit_queue_access(RETRY_ACTION, ticket_id, token, actor)
        except StoreError as e:
            return self._store_unavailable(RETRY_ACTION, ticket_id, e)
        if denied is not None:
            return denied
        self.log.info(
            "manual_retry_requested", ticket_id=ticket_id, actor_id=actor.actor_id
        )
        return self.queue.retry(ticket_id)

    def status(
        self, ticket_id: str, token: Optional[str], actor: Actor
    ) -> SuccessEnvelope | ErrorEnvelope:
        """Admitted status lookup of a queued ticket."""
        started = time.perf_counter()
        try:
            denied = self._admit_queue_access(STATUS_ACTION, ticket_id, token, actor)
            if denied is not None:
                return denied
            status = self.queue.status(ticket_id)
        except StoreError as e:
            return self._store_unavailable(STATUS_ACTION, ticket_id, e)
        return success_envelope(
            status, generate_request_id(), (time.perf_counter() - started) * 1000
        )

    def process_queue(self) -> Dict[str, int]:
        return self.queue.process_queue()

    def cleanup(self) -> int:
        return self.queue.cleanup()

    def clear_queue(self) -> None:
        self.queue.clear()

    def statistics(self) -> Dict[str, Any]:
        stats = self.queue.statistics()
        stats["configuration"].update(
            {
                "timeout_s": self.dispatch_config.timeout_s,
                "rate_limit_per_window": self.dispatch_config.rate_limit_per_window,
                "window_s": self.dispatch_config.window_s,
            }
        )
        return stats

    def issue_token(self, action: str, actor: Actor) -> str:
        """Issue a fresh anti-forgery token for an action.

        Raises:
            ValidationError: If the action is unknown
            SecurityError: If the actor may not call the action
        """
        if action in (RETRY_ACTION, STATUS_ACTION):
            if not actor.can(self.dispatch_config.default_capability):
                raise SecurityError(code=ErrorCode.INSUFFICIENT_AUTHORIZATION)
            return self.tokens.issue(action, actor.actor_id)

        registration = self.registry.get(action)
        if registration is None:
            raise ValidationError(code=ErrorCode.UNKNOWN_ACTION)
        if not actor.authenticated and not registration.allow_anonymous:
            raise SecurityError(code=ErrorCode.INSUFFICIENT_AUTHORIZATION)

        self.log.debug("token_issued", action=action, actor_id=actor.actor_id)
        return self.tokens.issue(action, actor.actor_id)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False)

    def _store_unavailable(
        self, action: str, ticket_id: str, error: StoreError
    ) -> ErrorEnvelope:
        self.log.error(
            "queue_store_unavailable",
            action=action,
            ticket_id=ticket_id,
            error=str(error),
        )
        return store_error_envelope(generate_request_id(), {"ticket_id": ticket_id})

    def _admit_queue_access(
        self, action: str, ticket_id: str, token: Optional[str], actor: Actor
    ) -> Optional[ErrorEnvelope]:
        decision = self.gate.admit(
            action,
            token,
            actor,
            capability=self.dispatch_config.default_capability,
        )
        if not decision.allowed:
            return envelope_from_error(
                SecurityError(code=decision.reason), generate_request_id()
            )
        if not ticket_id or not ticket_id.strip():
            return envelope_from_error(
                ValidationError("Invalid request ID"), generate_request_id()
            )
        return None
