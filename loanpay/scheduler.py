"""Background release sweep."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from loanpay.config import settings
from loanpay.lifecycle import run_release_sweep

logger = logging.getLogger(__name__)

RELEASE_JOB_ID = "release_due_loans"


def build_scheduler() -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_release_sweep,
        trigger=IntervalTrigger(minutes=settings.SWEEP_INTERVAL_MINUTES),
        id=RELEASE_JOB_ID,
        coalesce=True,
        max_instances=1,
        misfire_grace_time=60,
        name="Release loans past the holding period",
        replace_existing=True,
    )
    logger.info("Release sweep scheduled every %d minutes", settings.SWEEP_INTERVAL_MINUTES)
    return scheduler
