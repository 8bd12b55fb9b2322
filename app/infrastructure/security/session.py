"""Signed session tokens used by the HTTP layer to derive the actor.

The command core never reads sessions itself; the transport resolves the
session into an Actor and passes it explicitly.
"""

import time
from typing import Callable, Optional

import jwt
from jwt import PyJWTError

from infrastructure.logging import get_module_logger
from infrastructure.security.models import Actor

logger = get_module_logger()

ALGORITHM = "HS256"
SESSION_TYPE = "session"


class SessionManager:
    """Issues and resolves session tokens carrying an Actor."""

    def __init__(
        self,
        secret_key: str,
        ttl_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def issue(self, actor: Actor) -> str:
        now = int(self._clock())
        claims = {
            "typ": SESSION_TYPE,
            "sub": actor.actor_id,
            "caps": sorted(actor.capabilities),
            "auth": actor.authenticated,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def resolve(self, token: str) -> Optional[Actor]:
        """Return the Actor for a session token, or None when it is not valid."""
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except PyJWTError as e:
            logger.warning("session_resolve_failed", error=str(e))
            return None

        if claims.get("typ") != SESSION_TYPE:
            logger.warning("session_resolve_failed", reason="wrong_type")
            return None

        if claims["exp"] <= self._clock():
            logger.info("session_expired", actor_id=claims["sub"])
            return None

        return Actor(
            actor_id=claims["sub"],
            capabilities=frozenset(claims.get("caps", [])),
            authenticated=bool(claims.get("auth", True)),
        )
