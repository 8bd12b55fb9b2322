"""Command dispatch data models."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel

from infrastructure.commands.errors import ErrorCode
from infrastructure.security.models import Actor

Handler = Callable[[Dict[str, Any]], Any]
Sanitizer = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class HandlerRegistration:
    """A named action bound to its handler and admission requirements.

    Created once at startup and immutable for the process lifetime.

    Attributes:
        action: Action identifier
        handler: Callable receiving the sanitized payload
        capability: Capability the actor must hold
        retry_enabled: Whether a failed call is queued for retry
        timeout: Execution budget in seconds (<= 0 disables the budget)
        allow_anonymous: Skip the authorization check for unauthenticated actors
        rate_limited: Whether the call counts against the rate limit
        payload_model: Optional pydantic model used to decode the payload
        sanitizer: Optional callable used instead of the default sanitizer
    """

    action: str
    handler: Handler
    capability: str = "manage_options"
    retry_enabled: bool = True
    timeout: float = 30
    allow_anonymous: bool = False
    rate_limited: bool = True
    payload_model: Optional[Type[BaseModel]] = None
    sanitizer: Optional[Sanitizer] = None


@dataclass
class RequestEnvelope:
    """One incoming call. Never persisted.

    Attributes:
        action: Action name as supplied by the client
        payload: Raw, untyped payload
        token: Anti-forgery token supplied with the call
        actor: Caller identity derived from the session
    """

    action: str
    payload: Dict[str, Any] = field(default_factory=dict)
    token: Optional[str] = None
    actor: Actor = field(default_factory=Actor.anonymous)


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of the admission gate."""

    allowed: bool
    reason: Optional[ErrorCode] = None
    retry_after: Optional[int] = None

    @classmethod
    def allow(cls) -> "AdmissionDecision":
        return cls(allowed=True)

    @classmethod
    def deny(
        cls, reason: ErrorCode, retry_after: Optional[int] = None
    ) -> "AdmissionDecision":
        return cls(allowed=False, reason=reason, retry_after=retry_after)
