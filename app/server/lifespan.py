"""Application lifespan: build the command service and the queue scheduler."""

import sys
import threading
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging import configure_logging
from infrastructure.services import get_command_service, get_settings
from jobs import scheduled_tasks

if TYPE_CHECKING:
    from infrastructure.commands.service import CommandService
    from infrastructure.configuration import Settings


def _scheduler_disabled_reason(settings: "Settings") -> Optional[str]:
    # Only the production deployment sweeps the shared queue
    if settings.PREFIX:
        return "prefix_not_empty"
    if "pytest" in sys.modules:
        return "test_environment"
    return None


def _log_configuration(settings: "Settings", logger: BoundLogger) -> None:
    sections = {
        name: sorted(value)
        for name, value in settings.model_dump().items()
        if isinstance(value, dict)
    }
    logger.info(
        "configuration_initialized",
        prefix=settings.PREFIX,
        log_level=settings.LOG_LEVEL,
        git_sha=settings.GIT_SHA,
    )
    for name, keys in sections.items():
        logger.info("configuration_loaded", config_setting=name, keys=keys)


def _start_scheduler(
    service: "CommandService", settings: "Settings", logger: BoundLogger
) -> Optional[threading.Event]:
    reason = _scheduler_disabled_reason(settings)
    if reason:
        logger.info("scheduled_tasks_skipped", reason=reason)
        return None
    scheduled_tasks.init(service, settings)
    logger.info("scheduled_tasks_started")
    return scheduled_tasks.run_continuously()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = configure_logging(settings=settings)
    logger.info("application_startup")
    _log_configuration(settings, logger)

    service = get_command_service()
    logger.info("command_service_ready", actions=service.registry.actions())
    stop_scheduler = _start_scheduler(service, settings, logger)

    app.state.settings = settings
    app.state.command_service = service

    try:
        yield
    finally:
        logger.info("application_shutdown")
        if stop_scheduler is not None:
            stop_scheduler.set()
        service.shutdown()
