"""Infrastructure security services.

Exports:
    Actor: Caller identity threaded through every command call
    TokenManager: Issues and validates action-scoped anti-forgery tokens
    SessionManager: Issues and resolves HTTP session tokens
    resolve_secret_key: Signing key from settings (or an ephemeral one)
"""

from infrastructure.security.models import Actor
from infrastructure.security.session import SessionManager
from infrastructure.security.tokens import TokenManager, resolve_secret_key

__all__ = [
    "Actor",
    "SessionManager",
    "TokenManager",
    "resolve_secret_key",
]
