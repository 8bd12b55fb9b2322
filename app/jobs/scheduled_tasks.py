"""Background jobs driving the command retry queue.

The sweep and the cleanup run on the ``schedule`` library's default
scheduler inside a daemon thread started by run_continuously().
"""

import functools
import threading
import time
from typing import TYPE_CHECKING, Callable

import schedule

from infrastructure.logging import get_module_logger

if TYPE_CHECKING:
    from infrastructure.commands.service import CommandService
    from infrastructure.configuration import Settings

logger = get_module_logger()

QUEUE_JOB_TAG = "command_queue"
HEARTBEAT_MINUTES = 5


def safe_run(job: Callable) -> Callable:
    """Log and drop any exception so one bad run never stops the scheduler."""

    @functools.wraps(job)
    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "safe_run_error",
                function=job.__name__,
                module=job.__module__,
                error=str(e),
                exc_info=True,
            )

    return wrapper


def init(service: "CommandService", settings: "Settings") -> None:
    retry = settings.retry
    every = schedule.every

    every(retry.process_interval_seconds).seconds.do(
        safe_run(process_retry_queue), service=service
    ).tag(QUEUE_JOB_TAG)
    every(retry.cleanup_interval_minutes).minutes.do(
        safe_run(cleanup_retry_queue), service=service
    ).tag(QUEUE_JOB_TAG)
    every(HEARTBEAT_MINUTES).minutes.do(safe_run(scheduler_heartbeat))

    logger.info(
        "scheduled_tasks_initialized",
        process_interval_seconds=retry.process_interval_seconds,
        cleanup_interval_minutes=retry.cleanup_interval_minutes,
    )


def scheduler_heartbeat() -> None:
    logger.info("scheduler_heartbeat", pending_jobs=len(schedule.get_jobs()))


def process_retry_queue(service: "CommandService") -> None:
    stats = service.process_queue()
    if stats["processed"]:
        logger.info("scheduled_retry_sweep_complete", **stats)


def cleanup_retry_queue(service: "CommandService") -> None:
    removed = service.cleanup()
    if removed:
        logger.info("scheduled_retry_cleanup_complete", removed=removed)


def run_continuously(interval: float = 1) -> threading.Event:
    """Run pending jobs every ``interval`` seconds on a daemon thread.

    Returns the event that stops the loop once set. Runs missed while the
    thread slept are not replayed; each due job runs once per wakeup.
    """
    stop = threading.Event()

    def _loop() -> None:
        while not stop.is_set():
            schedule.run_pending()
            stop.wait(interval)

    threading.Thread(target=_loop, daemon=True, name="scheduled-tasks").start()
    return stop
