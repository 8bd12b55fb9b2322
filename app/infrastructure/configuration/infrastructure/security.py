"""Anti-forgery token and session settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class SecuritySettings(InfrastructureSettings):
    """Token signing configuration.

    Environment Variables:
        SECURITY_TOKEN_SECRET_KEY: HMAC key for anti-forgery and session tokens.
            A random per-process key is used when unset, which invalidates
            every token on restart.
        SECURITY_TOKEN_TTL_SECONDS: Anti-forgery token lifetime (default: 12h)
        SECURITY_TOKEN_NAMESPACE_PREFIX: Prefix applied to every action namespace
        SECURITY_SESSION_TTL_SECONDS: Session token lifetime (default: 24h)
    """

    TOKEN_SECRET_KEY: str | None = Field(
        default=None, alias="SECURITY_TOKEN_SECRET_KEY"
    )
    token_ttl_seconds: int = Field(
        default=43200,
        alias="SECURITY_TOKEN_TTL_SECONDS",
        description="Lifetime of an anti-forgery token (seconds)",
    )
    token_namespace_prefix: str = Field(
        default="las_",
        alias="SECURITY_TOKEN_NAMESPACE_PREFIX",
        description="Prefix applied to every token action namespace",
    )
    session_ttl_seconds: int = Field(
        default=86400,
        alias="SECURITY_SESSION_TTL_SECONDS",
        description="Lifetime of a session token (seconds)",
    )
