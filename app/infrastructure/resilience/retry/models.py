"""Retry ticket model.

A ticket is the persisted record of one retryable failed request. It is
stored as a plain JSON object inside the queue document.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict


@dataclass
class RetryTicket:
    """Persisted record of a failed request awaiting re-attempt.

    Fields:
        id: Unique identifier (the originating request id)
        action: Registered action to re-invoke
        payload: Snapshot of the sanitized request payload
        attempts: Failed retry attempts so far
        next_retry: Earliest time (epoch seconds) the ticket may be retried
        created: When the ticket was created (epoch seconds)

    Example:
        ticket = RetryTicket.create(
            ticket_id="req_65f1c2a9b3e4d_a1B2c3D4",
            action="save_settings",
            payload={"menu_background_color": "#23282d"},
            now=time.time(),
            base_delay_ms=1000,
        )
    """

    id: str
    action: str
    payload: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 0
    next_retry: float = 0.0
    created: float = 0.0

    def __post_init__(self) -> None:
        """Validate required fields."""
        if not self.id:
            raise ValueError("id is required")
        if not self.action:
            raise ValueError("action is required")
        if not isinstance(self.payload, dict):
            raise ValueError("payload must be a dictionary")
        if self.attempts < 0:
            raise ValueError("attempts must be >= 0")

    @classmethod
    def create(
        cls,
        ticket_id: str,
        action: str,
        payload: Dict[str, Any],
        now: float,
        base_delay_ms: int,
    ) -> "RetryTicket":
        """New ticket, first due one base delay after creation."""
        return cls(
            id=ticket_id,
            action=action,
            payload=payload,
            attempts=0,
            next_retry=now + base_delay_ms / 1000,
            created=now,
        )

    def is_due(self, now: float) -> bool:
        return self.next_retry <= now

    def is_exhausted(self, max_retries: int) -> bool:
        return self.attempts >= max_retries

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RetryTicket":
        return cls(
            id=data["id"],
            action=data["action"],
            payload=dict(data.get("payload") or {}),
            attempts=int(data.get("attempts", 0)),
            next_retry=float(data.get("next_retry", 0.0)),
            created=float(data.get("created", 0.0)),
        )
