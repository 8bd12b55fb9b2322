"""Structlog configuration for the command service.

configure_logging() installs one processor chain for the whole process:
context variables first, then level, timestamp and callsite, then the
redaction and truncation processors from formatters.py, and finally a
renderer chosen by environment (console locally, JSON in production).

Loggers handed out by get_logger() and get_module_logger() are bound to
the calling module so entries can be traced back to the layer that
emitted them.
"""

import inspect
import logging
import sys
from types import FrameType
from typing import TYPE_CHECKING, Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import (
    mask_sensitive_data,
    truncate_large_values,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

SILENT_LEVEL = logging.CRITICAL + 1


def _running_under_pytest() -> bool:
    return "pytest" in sys.modules


def _callsite_adder() -> structlog.processors.CallsiteParameterAdder:
    return structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FILENAME,
            structlog.processors.CallsiteParameter.LINENO,
            structlog.processors.CallsiteParameter.FUNC_NAME,
        ]
    )


def _build_processors(json_output: bool) -> List[Any]:
    """Return the processor chain, ending with the renderer for the mode."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _callsite_adder(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        mask_sensitive_data(),
        truncate_large_values(),
        renderer,
    ]


def _apply(processors: List[Any], level: int, force: bool = False) -> BoundLogger:
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=force)
    return structlog.stdlib.get_logger()


def configure_logging(
    settings: Optional["Settings"] = None,
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the stdlib root logger.

    Explicit arguments win over values read from ``settings``. Without
    either, the level is INFO and output is rendered for the console.
    Under pytest nothing is emitted: the root logger is raised above
    CRITICAL and only a minimal chain is installed.

    Args:
        settings: Settings providing LOG_LEVEL and is_production.
        log_level: Level name override (DEBUG, INFO, WARNING, ...).
        is_production: Render JSON when true, console output otherwise.

    Returns:
        The configured root BoundLogger.
    """
    if _running_under_pytest():
        logging.root.setLevel(SILENT_LEVEL)
        return _apply(
            [
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            SILENT_LEVEL,
            force=True,
        )

    json_output = bool(settings.is_production) if settings is not None else False
    if is_production is not None:
        json_output = is_production

    level_name = log_level or (settings.LOG_LEVEL if settings is not None else "INFO")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    return _apply(_build_processors(json_output), level)


logger: BoundLogger = configure_logging()


def _caller_module_name(frame: Optional[FrameType]) -> Optional[str]:
    """Module name of the code that called the function running ``frame``."""
    caller = frame.f_back if frame is not None else None
    if caller is None:
        return None
    module = inspect.getmodule(caller)
    return module.__name__ if module else None


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Return a logger bound to ``name``, or to the calling module's name."""
    if name:
        return logger.bind(logger_name=name)
    module_name = _caller_module_name(inspect.currentframe())
    return logger.bind(logger_name=module_name or "unknown")


def get_module_logger() -> BoundLogger:
    """Return a logger bound to the calling module.

    The bound context carries ``module_path`` (the dotted module name) and
    ``component`` (its last segment), e.g. ``infrastructure.commands.dispatcher``
    logs with ``component="dispatcher"``.
    """
    module_name = _caller_module_name(inspect.currentframe())
    if module_name is None:
        return logger.bind(component="unknown")
    return logger.bind(
        component=module_name.rsplit(".", 1)[-1], module_path=module_name
    )
