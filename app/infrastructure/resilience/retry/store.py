"""Retry ticket storage.

This module provides the storage interface for retry tickets and an
implementation that keeps the whole queue as one document in the shared
key-value store. The protocol-based design allows the monolithic document to
be replaced by per-ticket records without touching the queue processor.
"""

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from infrastructure.commands.errors import CapacityError
from infrastructure.logging import get_module_logger
from infrastructure.persistence import KeyValueStore
from infrastructure.resilience.retry.models import RetryTicket

logger = get_module_logger()


class RetryTicketStore(Protocol):
    """Storage interface for retry tickets.

    Methods:
        enqueue: Add a new ticket, rejecting it when the queue is full
        get: Return a ticket by id, or None
        update: Replace a stored ticket (no-op when it is gone)
        delete: Remove a ticket, returning whether it was present
        list: Return all tickets
        count: Number of queued tickets
        apply: Remove and update several tickets in one write
        clear: Remove every ticket
    """

    def enqueue(self, ticket: RetryTicket, capacity: int) -> None:
        """Persist a new ticket.

        Raises:
            CapacityError: If the queue already holds ``capacity`` tickets
        """
        ...

    def get(self, ticket_id: str) -> Optional[RetryTicket]:
        ...

    def update(self, ticket: RetryTicket) -> bool:
        ...

    def delete(self, ticket_id: str) -> bool:
        ...

    def list(self) -> List[RetryTicket]:
        ...

    def count(self) -> int:
        ...

    def apply(
        self, removed_ids: Iterable[str], updated: Iterable[RetryTicket]
    ) -> None:
        ...

    def clear(self) -> None:
        ...


class KeyValueRetryTicketStore:
    """RetryTicketStore holding the queue as one document under one key.

    Every mutation re-reads the full collection, merges its change and writes
    the collection back. Concurrent writers from other processes can still
    lose an update (last write wins) but never corrupt the document. Writers
    within this process are serialized by a lock.

    Attributes:
        store: Shared key-value store
        queue_key: Key holding the queue document
    """

    def __init__(self, store: KeyValueStore, queue_key: str = "command_retry_queue"):
        self.store = store
        self.queue_key = queue_key
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, dict]:
        document = self.store.get(self.queue_key)
        if not isinstance(document, dict):
            return {}
        return document

    def _write(self, document: Dict[str, dict]) -> None:
        if document:
            self.store.set(self.queue_key, document)
        else:
            self.store.delete(self.queue_key)

    def _decode(self, ticket_id: str, data: dict) -> Optional[RetryTicket]:
        try:
            return RetryTicket.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("retry_ticket_malformed", ticket_id=ticket_id, error=str(e))
            return None

    def enqueue(self, ticket: RetryTicket, capacity: int) -> None:
        with self._lock:
            document = self._read()
            if ticket.id not in document and len(document) >= capacity:
                logger.warning(
                    "retry_queue_full",
                    ticket_id=ticket.id,
                    action=ticket.action,
                    queue_size=len(document),
                    capacity=capacity,
                )
                raise CapacityError(data={"queue_size": len(document)})

            document[ticket.id] = ticket.to_dict()
            self._write(document)

        logger.info(
            "retry_ticket_enqueued",
            ticket_id=ticket.id,
            action=ticket.action,
            next_retry=ticket.next_retry,
        )

    def get(self, ticket_id: str) -> Optional[RetryTicket]:
        data = self._read().get(ticket_id)
        if data is None:
            return None
        return self._decode(ticket_id, data)

    def update(self, ticket: RetryTicket) -> bool:
        with self._lock:
            document = self._read()
            if ticket.id not in document:
                return False
            document[ticket.id] = ticket.to_dict()
            self._write(document)
        return True

    def delete(self, ticket_id: str) -> bool:
        with self._lock:
            document = self._read()
            if document.pop(ticket_id, None) is None:
                return False
            self._write(document)
        logger.debug("retry_ticket_deleted", ticket_id=ticket_id)
        return True

    def list(self) -> List[RetryTicket]:
        tickets = []
        for ticket_id, data in self._read().items():
            ticket = self._decode(ticket_id, data)
            if ticket is not None:
                tickets.append(ticket)
        return tickets

    def count(self) -> int:
        return len(self._read())

    def apply(
        self, removed_ids: Iterable[str], updated: Iterable[RetryTicket]
    ) -> None:
        """Apply a sweep's outcome against the current document.

        Tickets that were added after the sweep read the queue are kept, and
        updates for tickets removed in the meantime are dropped.
        """
        with self._lock:
            document = self._read()
            for ticket_id in removed_ids:
                document.pop(ticket_id, None)
            for ticket in updated:
                if ticket.id in document:
                    document[ticket.id] = ticket.to_dict()
            self._write(document)

    def clear(self) -> None:
        with self._lock:
            self.store.delete(self.queue_key)
        logger.info("retry_queue_cleared", queue_key=self.queue_key)
