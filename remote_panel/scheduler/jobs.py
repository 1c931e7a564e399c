"""
remote_panel/scheduler/jobs.py

APScheduler-based periodic sheet sync.

Schedule
--------
  sheet_sync: every ``SYNC_INTERVAL_MINUTES`` minutes (default 30)

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import asyncio
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from remote_panel.config import get_sync_settings
from remote_panel.services.sheet_sync_service import get_sheet_sync_service

logger = logging.getLogger(__name__)

SHEET_SYNC_JOB_ID = "sheet_sync"


def run_sheet_sync() -> None:
    """
    Run one full sync cycle on the scheduler's worker thread.

    The cycle gets its own event loop; the sync service never raises for
    per-source failures, so only unexpected errors are logged here.
    """
    logger.info("Scheduler: sheet_sync starting")
    try:
        summary = asyncio.run(get_sheet_sync_service().sync_all())
    except Exception as exc:  # noqa: BLE001
        logger.warning("Scheduler: sheet_sync failed: %s", exc)
        return

    logger.info(
        "Scheduler: sheet_sync complete success=%s sheets_processed=%s "
        "sheets_with_errors=%s call_records=%s",
        summary.success,
        summary.sheets_processed,
        summary.sheets_with_errors,
        summary.call_records_updated,
    )


def build_scheduler(interval_minutes: int | None = None) -> BackgroundScheduler:
    """
    Build the scheduler and register the periodic sync job.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    """
    minutes = interval_minutes or get_sync_settings().interval_minutes
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_sheet_sync,
        trigger="interval",
        minutes=minutes,
        id=SHEET_SYNC_JOB_ID,
        name="Google Sheets sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=max(60, minutes * 30),
    )

    return scheduler
