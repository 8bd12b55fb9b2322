"""Handler registry for command registration and lookup."""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Type, Union

from pydantic import BaseModel

from infrastructure.commands.models import Handler, HandlerRegistration, Sanitizer
from infrastructure.logging import get_module_logger

logger = get_module_logger()

ActionName = Union[str, Enum]


def normalize_action(action: ActionName) -> str:
    """Return the string identifier for an action given as str or Enum member."""
    if isinstance(action, Enum):
        return str(action.value)
    return action


class HandlerRegistry:
    """Explicit table of registered actions.

    Owned by one composition root and passed to the dispatcher and the queue
    processor. Registration happens at startup; once sealed the table is
    read-only.

    Attributes:
        default_capability: Capability required when a registration names none
        default_timeout: Execution budget (seconds) when a registration names none

    Example:
        registry = HandlerRegistry()

        @registry.handler("save_settings", payload_model=SaveSettingsPayload)
        def save_settings(payload: dict) -> dict:
            ...

        registry.require(SettingsAction)
        registry.seal()
    """

    def __init__(
        self, default_capability: str = "manage_options", default_timeout: float = 30
    ):
        self.default_capability = default_capability
        self.default_timeout = default_timeout
        self._handlers: Dict[str, HandlerRegistration] = {}
        self._sealed = False

    def register(
        self,
        action: ActionName,
        handler: Handler,
        *,
        capability: Optional[str] = None,
        retry_enabled: bool = True,
        timeout: Optional[float] = None,
        allow_anonymous: bool = False,
        rate_limited: bool = True,
        payload_model: Optional[Type[BaseModel]] = None,
        sanitizer: Optional[Sanitizer] = None,
    ) -> HandlerRegistration:
        """Register a handler for an action.

        Args:
            action: Action identifier (str or str Enum member)
            handler: Callable receiving the sanitized payload dict
            capability: Required capability (defaults to default_capability)
            retry_enabled: Queue a retry ticket when the handler fails
            timeout: Execution budget in seconds (defaults to default_timeout)
            allow_anonymous: Permit unauthenticated actors
            rate_limited: Count calls against the rate limit
            payload_model: Pydantic model used to decode the payload
            sanitizer: Custom sanitizer used instead of the default

        Returns:
            The stored HandlerRegistration

        Raises:
            RuntimeError: If the registry is sealed
            TypeError: If handler is not callable
            ValueError: If the action is empty or already registered
        """
        if self._sealed:
            raise RuntimeError(
                "Handler registry is sealed; register handlers at startup"
            )
        if not callable(handler):
            raise TypeError(f"Handler for {action!r} must be callable")

        name = normalize_action(action)
        if not name:
            raise ValueError("Action name must not be empty")
        if name in self._handlers:
            raise ValueError(f"Handler already registered for action: {name}")
        if payload_model is not None and sanitizer is not None:
            raise ValueError(
                f"Action {name} may declare a payload_model or a sanitizer, not both"
            )

        registration = HandlerRegistration(
            action=name,
            handler=handler,
            capability=capability or self.default_capability,
            retry_enabled=retry_enabled,
            timeout=self.default_timeout if timeout is None else timeout,
            allow_anonymous=allow_anonymous,
            rate_limited=rate_limited,
            payload_model=payload_model,
            sanitizer=sanitizer,
        )
        self._handlers[name] = registration
        logger.debug(
            "handler_registered",
            action=name,
            capability=registration.capability,
            retry_enabled=retry_enabled,
            allow_anonymous=allow_anonymous,
        )
        return registration

    def handler(self, action: ActionName, **options) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""

        def decorator(func: Handler) -> Handler:
            self.register(action, func, **options)
            return func

        return decorator

    def get(self, action: ActionName) -> Optional[HandlerRegistration]:
        return self._handlers.get(normalize_action(action))

    def __contains__(self, action: ActionName) -> bool:
        return normalize_action(action) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def actions(self) -> List[str]:
        return sorted(self._handlers)

    def require(self, actions: Iterable[ActionName]) -> None:
        """Verify that every action in a closed set has a handler.

        Raises:
            ValueError: Naming the actions with no registered handler
        """
        missing = [
            name
            for name in (normalize_action(a) for a in actions)
            if name not in self._handlers
        ]
        if missing:
            raise ValueError(f"No handler registered for actions: {', '.join(missing)}")

    def seal(self) -> None:
        self._sealed = True
        logger.info("handler_registry_sealed", handlers=len(self._handlers))

    @property
    def sealed(self) -> bool:
        return self._sealed
