"""
Scheduled jobs (APScheduler)

Runs the recurring transaction generator once a day.
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from vesselbook.core.config import settings
from vesselbook.db.session import SessionLocal
from vesselbook.services import recurrence

logger = logging.getLogger(__name__)

scheduler: Optional[AsyncIOScheduler] = None


async def generate_recurring_transactions():
    """Daily job: create the transactions of every due recurring template"""
    try:
        async with SessionLocal() as db:
            count = await recurrence.generate_due(db)
        logger.info(f"✅ Recurring transactions generated: {count}")
    except Exception:
        logger.exception("❌ Recurring transaction generation failed")


def init_scheduler():
    global scheduler

    if not settings.RECURRING_ENABLED:
        logger.info("⏸️ Recurring transaction job disabled")
        return

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        generate_recurring_transactions,
        trigger=CronTrigger(hour=settings.RECURRING_HOUR, minute=settings.RECURRING_MINUTE),
        id="recurring_transactions",
        name="Generate recurring transactions",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"⏰ Scheduler started - recurring transactions daily at "
        f"{settings.RECURRING_HOUR:02d}:{settings.RECURRING_MINUTE:02d}"
    )


def shutdown_scheduler():
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ Scheduler stopped")


def get_scheduler_status() -> dict:
    if not scheduler:
        return {"enabled": settings.RECURRING_ENABLED, "running": False, "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
        })
    return {"enabled": settings.RECURRING_ENABLED, "running": scheduler.running, "jobs": jobs}
