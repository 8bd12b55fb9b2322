"""Admission gate: anti-forgery token, authorization, rate limit.

Checks short-circuit in that order. Denials are terminal for the call and
are never queued for retry.
"""

from typing import Optional

from infrastructure.commands.errors import ErrorCode
from infrastructure.commands.models import AdmissionDecision, HandlerRegistration
from infrastructure.commands.rate_limiter import RateLimiter
from infrastructure.logging import get_module_logger
from infrastructure.security import Actor, TokenManager

logger = get_module_logger()


class AdmissionGate:
    """Combined token, capability and rate checks performed before a handler runs."""

    def __init__(self, tokens: TokenManager, rate_limiter: RateLimiter):
        self.tokens = tokens
        self.rate_limiter = rate_limiter
        self.log = logger.bind(component="admission_gate")

    def admit(
        self,
        action: str,
        token: Optional[str],
        actor: Actor,
        capability: str,
        allow_anonymous: bool = False,
        rate_limited: bool = True,
        limit: Optional[int] = None,
    ) -> AdmissionDecision:
        """Decide whether a call may proceed.

        Args:
            action: Token namespace (the action name)
            token: Anti-forgery token supplied by the client
            actor: Caller identity
            capability: Capability the actor must hold
            allow_anonymous: Skip the capability check for unauthenticated actors
            rate_limited: Whether to consult the rate limiter
            limit: Override for the rate limiter's default limit

        Returns:
            AdmissionDecision (allowed, or denied with an ErrorCode reason)
        """
        if not self.tokens.validate(token, action, actor.actor_id):
            return self._deny(action, actor, ErrorCode.INVALID_TOKEN)

        skip_capability = allow_anonymous and not actor.authenticated
        if not skip_capability and not actor.can(capability):
            return self._deny(
                action,
                actor,
                ErrorCode.INSUFFICIENT_AUTHORIZATION,
                capability=capability,
            )

        if rate_limited:
            decision = self.rate_limiter.check(action, actor.actor_id, limit)
            if not decision.allowed:
                self._log_denial(action, actor, decision.reason)
                return decision

        return AdmissionDecision.allow()

    def admit_registration(
        self, registration: HandlerRegistration, token: Optional[str], actor: Actor
    ) -> AdmissionDecision:
        return self.admit(
            registration.action,
            token,
            actor,
            capability=registration.capability,
            allow_anonymous=registration.allow_anonymous,
            rate_limited=registration.rate_limited,
        )

    def _deny(
        self, action: str, actor: Actor, reason: ErrorCode, **kwargs
    ) -> AdmissionDecision:
        self._log_denial(action, actor, reason, **kwargs)
        return AdmissionDecision.deny(reason)

    def _log_denial(self, action: str, actor: Actor, reason, **kwargs) -> None:
        self.log.warning(
            "admission_denied",
            action=action,
            actor_id=actor.actor_id,
            reason=reason.value if reason else None,
            **kwargs,
        )
