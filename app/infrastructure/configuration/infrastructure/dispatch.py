"""Command dispatch and admission settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DispatchSettings(InfrastructureSettings):
    """Dispatcher and admission gate configuration.

    Environment Variables:
        DISPATCH_TIMEOUT_S: Default handler execution budget (default: 30s)
        DISPATCH_RATE_LIMIT_PER_WINDOW: Calls allowed per actor/action/window (default: 60)
        DISPATCH_WINDOW_S: Fixed rate limit window size (default: 60s)
        DISPATCH_DEFAULT_CAPABILITY: Capability required when a handler does
            not declare one (default: manage_options)
        DISPATCH_MAX_WORKERS: Worker threads available to handlers (default: 4)
    """

    timeout_s: float = Field(
        default=30,
        alias="DISPATCH_TIMEOUT_S",
        description="Default handler execution budget in seconds",
    )
    rate_limit_per_window: int = Field(
        default=60,
        alias="DISPATCH_RATE_LIMIT_PER_WINDOW",
        description="Calls allowed per (action, actor) within one window",
    )
    window_s: int = Field(
        default=60,
        alias="DISPATCH_WINDOW_S",
        description="Fixed rate limit window size in seconds",
    )
    default_capability: str = Field(
        default="manage_options",
        alias="DISPATCH_DEFAULT_CAPABILITY",
        description="Administrative capability required by default",
    )
    max_workers: int = Field(
        default=4,
        alias="DISPATCH_MAX_WORKERS",
        description="Worker threads available to handlers",
    )
