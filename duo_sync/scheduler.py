"""APScheduler-based interval scheduling for the Duo sync."""

from __future__ import annotations

import logging

from apscheduler.events import EVENT_JOB_ERROR
from apscheduler.schedulers.blocking import BlockingScheduler

from duo_sync.config import SyncConfig

logger = logging.getLogger("duo_sync.scheduler")

JOB_ID = "duo_sync"


def _run_sync(config: SyncConfig) -> None:
    """One scheduled run. Failures are logged; the next interval tries again."""
    from duo_sync.cli import run_sync

    report = run_sync(config)
    if not report.ok:
        logger.warning(
            "Scheduled sync finished with failed resource types: %s",
            sorted(report.failures),
            extra={"run_id": report.run_id},
        )


def _on_job_error(event) -> None:
    """Log job execution errors."""
    logger.error(
        "Job %s raised an exception: %s",
        event.job_id,
        event.exception,
    )


def build_scheduler(config: SyncConfig) -> BlockingScheduler:
    scheduler = BlockingScheduler()
    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    scheduler.add_job(
        _run_sync,
        "interval",
        minutes=config.scheduler.interval_min,
        args=[config],
        id=JOB_ID,
        max_instances=1,
        misfire_grace_time=config.scheduler.misfire_grace_time,
    )
    return scheduler


def start_scheduler(config: SyncConfig) -> None:
    """Start the blocking scheduler; runs until interrupted."""
    scheduler = build_scheduler(config)
    logger.info(
        "Starting scheduler with jobs: %s",
        [j.id for j in scheduler.get_jobs()],
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
