"""Request context binding for structured logging.

Binds request-scoped fields (correlation id, HTTP path and method) so every
log entry emitted while serving a request carries them, including entries
from handlers running on worker threads.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(request_path="/api/v1/commands/ping", request_method="POST"):
        logger.info("processing_request")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog

CORRELATION_HEADER = "X-Correlation-ID"


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind request-scoped context to all logs within the block.

    Args:
        correlation_id: Request identifier. Generated when not provided.
        request_path: HTTP request path.
        request_method: HTTP method.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id in effect for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    if request_path is not None:
        context["request_path"] = request_path
    if request_method is not None:
        context["request_method"] = request_method
    context.update(extra_context)

    tokens = structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")
