"""Structured logging for the command service.

Call configure_logging() once at startup, then obtain loggers with
get_module_logger() and emit snake_case events with keyword context:

    logger = get_module_logger()
    logger.info("retry_ticket_queued", ticket_id=ticket_id)

Request-scoped fields are bound with bind_request_context().
"""

from infrastructure.logging.context import (
    CORRELATION_HEADER,
    bind_request_context,
    get_correlation_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    mask_sensitive_data,
    truncate_large_values,
)
from infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)

__all__ = [
    "CORRELATION_HEADER",
    "SENSITIVE_PATTERNS",
    "bind_request_context",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "get_module_logger",
    "mask_sensitive_data",
    "truncate_large_values",
]
