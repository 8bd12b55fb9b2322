"""Retry queue processor.

This module re-attempts queued retry tickets through the handler registry.
A sweep is triggered externally (scheduler or administrator); the processor
runs no timer of its own.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from infrastructure.commands.envelope import (
    envelope_from_error,
    error_envelope,
    generate_request_id,
    store_error_envelope,
    success_envelope,
)
from infrastructure.commands.errors import CommandError, ErrorCode, ExhaustionError
from infrastructure.commands.execution import HandlerExecutor, handler_running
from infrastructure.commands.registry import HandlerRegistry
from infrastructure.logging import get_module_logger
from infrastructure.models import ErrorEnvelope, SuccessEnvelope
from infrastructure.persistence import StoreError
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.models import RetryTicket
from infrastructure.resilience.retry.store import RetryTicketStore

logger = get_module_logger()


class QueueProcessor:
    """Sweeps, retries and inspects retry tickets.

    Queued handlers are re-invoked without running admission again: the
    original request was admitted when it was first dispatched.

    Attributes:
        store: RetryTicketStore holding the queue
        registry: HandlerRegistry shared with the dispatcher
        config: RetryConfig controlling backoff, bounds and retention
        executor: HandlerExecutor enforcing handler timeouts
    """

    def __init__(
        self,
        store: RetryTicketStore,
        registry: HandlerRegistry,
        config: RetryConfig | None = None,
        executor: HandlerExecutor | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.registry = registry
        self.config = config or RetryConfig()
        self.executor = executor or HandlerExecutor()
        self._clock = clock
        self.log = logger.bind(component="queue_processor")

    def enqueue(
        self, ticket_id: str, action: str, payload: Dict[str, Any]
    ) -> RetryTicket:
        """Queue a failed request for retry.

        Raises:
            CapacityError: If the queue is full
        """
        ticket = RetryTicket.create(
            ticket_id=ticket_id,
            action=action,
            payload=payload,
            now=self._clock(),
            base_delay_ms=self.config.base_delay_ms,
        )
        self.store.enqueue(ticket, capacity=self.config.queue_size_max)
        return ticket

    def process_queue(self, now: Optional[float] = None) -> Dict[str, int]:
        """Run one sweep over every queued ticket.

        Exhausted tickets are removed whether or not they are due. Calls made
        from inside a handler are refused and return all-zero statistics.

        Returns:
            Dictionary with sweep statistics:
                - processed: Tickets examined
                - succeeded: Tickets whose handler completed (removed)
                - failed: Exhausted tickets (removed)
                - deferred: Tickets not yet due, or rescheduled after a failure

        Example:
            stats = processor.process_queue()
            self.log.info("sweep_complete", **stats)
        """
        stats = {"processed": 0, "succeeded": 0, "failed": 0, "deferred": 0}
        if handler_running():
            self.log.error("retry_sweep_reentrant_rejected")
            return stats

        now = self._clock() if now is None else now
        tickets = self.store.list()

        removed: List[str] = []
        updated: List[RetryTicket] = []

        for ticket in tickets:
            stats["processed"] += 1

            if ticket.is_exhausted(self.config.max_retries):
                removed.append(ticket.id)
                stats["failed"] += 1
                self.log.warning(
                    "retry_ticket_exhausted",
                    ticket_id=ticket.id,
                    action=ticket.action,
                    attempts=ticket.attempts,
                )
                continue

            if not ticket.is_due(now):
                stats["deferred"] += 1
                continue

            succeeded, _ = self._attempt(ticket)
            if succeeded:
                removed.append(ticket.id)
                stats["succeeded"] += 1
            else:
                updated.append(self._reschedule(ticket, now))
                stats["deferred"] += 1

        if removed or updated:
            self.store.apply(removed, updated)

        if tickets:
            self.log.info("retry_sweep_complete", **stats)
        else:
            self.log.debug("retry_sweep_empty")

        return stats

    def retry(self, ticket_id: str) -> SuccessEnvelope | ErrorEnvelope:
        """Attempt one queued ticket immediately, outside the sweep cadence.

        Removes the ticket on success. On failure the ticket is left as it was
        for the next sweep. A store failure is reported as ``request_failed``
        with ``reason: store_error``; if it happens after the handler
        succeeded, the ticket stays queued and may run again.
        """
        request_id = generate_request_id()
        if handler_running():
            self.log.error("retry_reentrant_rejected", ticket_id=ticket_id)
            return error_envelope(
                ErrorCode.REQUEST_FAILED,
                request_id,
                message="Queued requests cannot be retried from within a handler",
                data={"ticket_id": ticket_id},
            )

        try:
            ticket = self.store.get(ticket_id)
        except StoreError as e:
            return self._store_failure(ticket_id, request_id, e)
        if ticket is None:
            return error_envelope(
                ErrorCode.NOT_FOUND, request_id, data={"ticket_id": ticket_id}
            )

        if ticket.is_exhausted(self.config.max_retries):
            return envelope_from_error(
                ExhaustionError(
                    data={"ticket_id": ticket_id, "attempts": ticket.attempts}
                ),
                request_id,
            )

        started = time.perf_counter()
        succeeded, result = self._attempt(ticket)
        execution_time_ms = (time.perf_counter() - started) * 1000

        if not succeeded:
            return error_envelope(
                ErrorCode.REQUEST_FAILED,
                request_id,
                message="Retry failed",
                data={"ticket_id": ticket_id, "attempts": ticket.attempts},
            )

        try:
            self.store.delete(ticket_id)
        except StoreError as e:
            return self._store_failure(ticket_id, request_id, e)
        self.log.info("retry_ticket_manual_success", ticket_id=ticket_id)
        return success_envelope(result, request_id, execution_time_ms)

    def _store_failure(
        self, ticket_id: str, request_id: str, error: StoreError
    ) -> ErrorEnvelope:
        self.log.error("retry_store_unavailable", ticket_id=ticket_id, error=str(error))
        return store_error_envelope(request_id, {"ticket_id": ticket_id})

    def status(self, ticket_id: str) -> Dict[str, Any]:
        """Report whether a ticket is still queued.

        An absent ticket is reported as ``completed``, which is also what a
        ticket id that never existed looks like.
        """
        ticket = self.store.get(ticket_id)
        if ticket is None:
            return {"status": "completed"}

        status: Dict[str, Any] = {
            "status": "queued",
            "attempts": ticket.attempts,
            "next_retry": ticket.next_retry,
            "max_retries": self.config.max_retries,
        }
        if ticket.is_exhausted(self.config.max_retries):
            status["error"] = ErrorCode.MAX_RETRIES_REACHED.value
        return status

    def cleanup(self, now: Optional[float] = None) -> int:
        """Remove tickets older than the retention horizon.

        Returns:
            Number of tickets removed
        """
        now = self._clock() if now is None else now
        expired = [
            ticket.id
            for ticket in self.store.list()
            if now - ticket.created > self.config.retention_seconds
        ]
        if expired:
            self.store.apply(expired, [])
            self.log.info("retry_queue_cleaned", removed=len(expired))
        return len(expired)

    def statistics(self, now: Optional[float] = None) -> Dict[str, Any]:
        """Snapshot of the queue for diagnostics."""
        now = self._clock() if now is None else now
        tickets = self.store.list()

        stats: Dict[str, Any] = {
            "registered_handlers": len(self.registry),
            "queued_requests": len(tickets),
            "queue_utilization": round(
                len(tickets) / self.config.queue_size_max * 100, 2
            ),
            "configuration": {
                "max_retries": self.config.max_retries,
                "base_delay_ms": self.config.base_delay_ms,
                "max_delay_ms": self.config.max_delay_ms,
                "queue_size_max": self.config.queue_size_max,
                "retention_h": self.config.retention_h,
            },
        }

        if tickets:
            attempts = [ticket.attempts for ticket in tickets]
            ages = [now - ticket.created for ticket in tickets]
            stats["queue_analysis"] = {
                "avg_attempts": round(sum(attempts) / len(attempts), 2),
                "max_attempts": max(attempts),
                "avg_age_seconds": round(sum(ages) / len(ages)),
                "oldest_request_age": round(max(ages)),
            }

        return stats

    def clear(self) -> None:
        self.store.clear()

    def _attempt(self, ticket: RetryTicket) -> Tuple[bool, Any]:
        """Invoke the ticket's handler once.

        Returns:
            (succeeded, handler result)
        """
        registration = self.registry.get(ticket.action)
        if registration is None:
            self.log.warning(
                "retry_ticket_unknown_action",
                ticket_id=ticket.id,
                action=ticket.action,
            )
            return False, None

        try:
            result = self.executor.run(registration, dict(ticket.payload))
        except CommandError as e:
            self.log.warning(
                "retry_attempt_failed",
                ticket_id=ticket.id,
                action=ticket.action,
                attempt=ticket.attempts + 1,
                code=e.code.value,
                error=e.message,
            )
            return False, None
        except Exception as e:  # pylint: disable=broad-except
            self.log.warning(
                "retry_attempt_failed",
                ticket_id=ticket.id,
                action=ticket.action,
                attempt=ticket.attempts + 1,
                error=str(e),
                exc_info=True,
            )
            return False, None

        self.log.info(
            "retry_attempt_succeeded",
            ticket_id=ticket.id,
            action=ticket.action,
            attempt=ticket.attempts + 1,
        )
        return True, result

    def _reschedule(self, ticket: RetryTicket, now: float) -> RetryTicket:
        attempts = ticket.attempts + 1
        next_retry = max(ticket.next_retry, now + self.config.backoff_seconds(attempts))
        self.log.info(
            "retry_ticket_rescheduled",
            ticket_id=ticket.id,
            action=ticket.action,
            attempts=attempts,
            next_retry=next_retry,
        )
        return RetryTicket(
            id=ticket.id,
            action=ticket.action,
            payload=ticket.payload,
            attempts=attempts,
            next_retry=next_retry,
            created=ticket.created,
        )
