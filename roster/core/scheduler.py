"""Background job scheduler for nightly list generation."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlmodel import Session

from roster.core.config import settings
from roster.core.database import engine
from roster.lists.generator import GenerationState, generate_lists
from roster.lists.store import SqlRecordStore

logger = logging.getLogger(__name__)

JOB_ID = "generate_lists"

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def generate_lists_job():
    """Background list generation job."""
    try:
        with Session(engine) as session:
            stats = generate_lists(SqlRecordStore(session))
            GenerationState.record_run(stats)
            logger.info(f"Background list generation completed: {stats}")
    except Exception as e:
        GenerationState.record_failure(str(e))
        logger.error(f"Background list generation failed: {e}")


def build_trigger() -> CronTrigger:
    """Daily trigger at the configured wall-clock time."""
    return CronTrigger(
        hour=settings.generate_hour,
        minute=settings.generate_minute,
        timezone=settings.timezone,
    )


def start_scheduler():
    """Start the background scheduler."""
    scheduler.add_job(
        generate_lists_job,
        trigger=build_trigger(),
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,  # Never two runs against the store at once
        coalesce=True,
        misfire_grace_time=settings.misfire_grace_seconds,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, generating lists every day at "
        f"{settings.generate_hour:02d}:{settings.generate_minute:02d} ({settings.timezone})"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
