"""Action-scoped anti-forgery tokens.

A token proves that a request was prepared by the legitimate client session
for one specific action. Tokens are short-lived HS256 JWTs whose ``act``
claim holds the action namespace (prefix + action) and whose ``sub`` claim
holds the actor id, so a token minted for one action or actor never
validates for another.

Usage:
    from infrastructure.security import TokenManager

    tokens = TokenManager(secret_key="...", ttl_seconds=3600)
    token = tokens.issue("save_settings", actor_id="42")
    tokens.validate(token, "save_settings", actor_id="42")  # True
"""

import secrets
import time
import uuid
from typing import TYPE_CHECKING, Callable, Optional

import jwt
from jwt import PyJWTError

from infrastructure.logging import get_module_logger

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

ALGORITHM = "HS256"


def resolve_secret_key(settings: "Settings") -> str:
    """Return the configured signing key, or a random per-process key.

    Tokens signed with a generated key do not survive a restart.
    """
    if settings.security.TOKEN_SECRET_KEY:
        return settings.security.TOKEN_SECRET_KEY
    logger.warning("signing_key_not_configured", using="ephemeral_key")
    return secrets.token_urlsafe(32)


class TokenManager:
    """Issues and validates action-scoped anti-forgery tokens.

    Args:
        secret_key: HMAC signing key
        ttl_seconds: Token lifetime
        namespace_prefix: Prefix applied to the action to form the namespace
        clock: Time source (seconds since epoch)
    """

    def __init__(
        self,
        secret_key: str,
        ttl_seconds: int = 43200,
        namespace_prefix: str = "las_",
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._secret_key = secret_key
        self.ttl_seconds = ttl_seconds
        self.namespace_prefix = namespace_prefix
        self._clock = clock
        self.log = logger.bind(component="token_manager")

    @classmethod
    def from_settings(
        cls, settings: "Settings", clock: Callable[[], float] = time.time
    ) -> "TokenManager":
        return cls(
            secret_key=resolve_secret_key(settings),
            ttl_seconds=settings.security.token_ttl_seconds,
            namespace_prefix=settings.security.token_namespace_prefix,
            clock=clock,
        )

    def namespace(self, action: str) -> str:
        return f"{self.namespace_prefix}{action}"

    def issue(self, action: str, actor_id: str) -> str:
        """Issue a token for an action on behalf of an actor."""
        if not action:
            raise ValueError("action is required")

        now = int(self._clock())
        claims = {
            "act": self.namespace(action),
            "sub": actor_id,
            "iat": now,
            "exp": now + self.ttl_seconds,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def validate(self, token: Optional[str], action: str, actor_id: str) -> bool:
        """Check that a token was issued for this action and actor and is unexpired.

        Returns:
            True when the token is valid, False otherwise (never raises)
        """
        if not token or not action:
            self._log_failure(action, actor_id, "missing_token_or_action")
            return False

        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["act", "sub", "exp"],
                },
            )
        except PyJWTError as e:
            self._log_failure(action, actor_id, "decode_failed", error=str(e))
            return False

        # Expiry is checked against the injected clock
        if claims["exp"] <= self._clock():
            self._log_failure(action, actor_id, "expired")
            return False

        if claims["act"] != self.namespace(action):
            self._log_failure(action, actor_id, "namespace_mismatch")
            return False

        if claims["sub"] != actor_id:
            self._log_failure(action, actor_id, "actor_mismatch")
            return False

        return True

    def _log_failure(self, action: str, actor_id: str, reason: str, **kwargs) -> None:
        self.log.warning(
            "security_check_failed",
            check="anti_forgery",
            action=action,
            actor_id=actor_id,
            reason=reason,
            **kwargs,
        )
