"""Dispatch configuration."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


@dataclass(frozen=True)
class DispatchConfig:
    """Configuration for admission and handler execution.

    Attributes:
        timeout_s: Default handler execution budget in seconds
        rate_limit_per_window: Calls allowed per actor and action in one window
        window_s: Rate limit window length in seconds
        default_capability: Capability required when a handler names none
        max_workers: Worker threads available to handlers
    """

    timeout_s: float = 30
    rate_limit_per_window: int = 60
    window_s: int = 60
    default_capability: str = "manage_options"
    max_workers: int = 4

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.rate_limit_per_window < 1:
            raise ValueError("rate_limit_per_window must be at least 1")
        if self.window_s < 1:
            raise ValueError("window_s must be at least 1")
        if not self.default_capability:
            raise ValueError("default_capability is required")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DispatchConfig":
        dispatch = settings.dispatch
        return cls(
            timeout_s=dispatch.timeout_s,
            rate_limit_per_window=dispatch.rate_limit_per_window,
            window_s=dispatch.window_s,
            default_capability=dispatch.default_capability,
            max_workers=dispatch.max_workers,
        )
