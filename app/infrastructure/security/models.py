"""Actor identity passed explicitly through every command call."""

from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, Field


class Actor(BaseModel):
    """The caller on whose behalf a command runs.

    Attributes:
        actor_id: Stable identifier (user id, or an origin key for anonymous callers)
        capabilities: Capabilities held by the actor (e.g. manage_options)
        authenticated: Whether the actor holds a verified session
    """

    model_config = ConfigDict(frozen=True)

    actor_id: str
    capabilities: FrozenSet[str] = Field(default_factory=frozenset)
    authenticated: bool = True

    @classmethod
    def anonymous(cls, origin: str = "unknown") -> "Actor":
        """Build an unauthenticated actor keyed by its origin (e.g. client address)."""
        return cls(
            actor_id=f"anonymous:{origin}",
            capabilities=frozenset(),
            authenticated=False,
        )

    def can(self, capability: str) -> bool:
        return self.authenticated and capability in self.capabilities
