"""Handler execution under a bounded time budget.

Handlers run on a worker thread and the caller waits at most the handler's
timeout. A handler that overruns is reported as a transient failure. If it
was still waiting for a worker it is cancelled and never runs; if it had
already started it keeps its worker until it returns.

Every invocation, inline or pooled, marks its context as running a handler
so that the dispatcher and the queue processor can refuse calls made from
inside a handler.
"""

import contextvars
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Callable, Dict

from infrastructure.commands.errors import TransientError
from infrastructure.commands.models import HandlerRegistration
from infrastructure.logging import get_module_logger

logger = get_module_logger()

_handler_active: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "command_handler_active", default=False
)


def handler_running() -> bool:
    """True when called from inside a handler invoked by HandlerExecutor."""
    return _handler_active.get()


def _guarded(
    handler: Callable[[Dict[str, Any]], Any], payload: Dict[str, Any]
) -> Any:
    token = _handler_active.set(True)
    try:
        return handler(payload)
    finally:
        _handler_active.reset(token)


class HandlerExecutor:
    """Runs registered handlers, enforcing each registration's timeout.

    Args:
        max_workers: Size of the worker pool shared by all handlers
    """

    def __init__(self, max_workers: int = 4):
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="command-handler"
        )

    def run(self, registration: HandlerRegistration, payload: Dict[str, Any]) -> Any:
        """Invoke the handler and return its result.

        Exceptions raised by the handler propagate unchanged.

        Raises:
            TransientError: If the handler exceeds its timeout
        """
        if registration.timeout <= 0:
            return _guarded(registration.handler, payload)

        # The worker runs in a copy of the caller's context so context-bound
        # state (log context, handler guard) follows the call.
        context = contextvars.copy_context()
        future = self._pool.submit(
            context.run, _guarded, registration.handler, payload
        )
        try:
            return future.result(timeout=registration.timeout)
        except FuturesTimeoutError as e:
            cancelled = future.cancel()
            logger.warning(
                "handler_timed_out",
                action=registration.action,
                timeout=registration.timeout,
                started=not cancelled,
            )
            raise TransientError(
                f"Handler exceeded its {registration.timeout}s execution budget"
            ) from e

    def shutdown(self, wait: bool = False) -> None:
        self._pool.shutdown(wait=wait)
