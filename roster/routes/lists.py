"""List generation routes for triggering and monitoring the nightly job."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from roster.core.config import settings
from roster.core.database import get_session
from roster.core.scheduler import JOB_ID, scheduler
from roster.lists.generator import GenerationState, generate_lists
from roster.lists.store import SqlRecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lists", tags=["lists"])


@router.post("/generate")
async def trigger_generation(session: Session = Depends(get_session)):
    """
    Manually run list generation.

    Processes every event that is currently due, exactly as the nightly job
    does, and returns the run statistics. Events already generated are never
    touched again, so triggering while the nightly job runs is safe.
    """
    try:
        stats = generate_lists(SqlRecordStore(session))
    except Exception as e:
        GenerationState.record_failure(str(e))
        logger.error(f"Manual list generation failed: {e}")
        raise HTTPException(status_code=500, detail="List generation failed")

    GenerationState.record_run(stats)
    return stats


@router.get("/status")
async def generation_status():
    """
    Get current list generation status.

    Returns JSON with the schedule, the next planned run (when the scheduler
    is running) and the outcome of the last run.
    """
    status = GenerationState.get_status()
    job = scheduler.get_job(JOB_ID) if scheduler.running else None
    next_run = job.next_run_time if job else None

    return {
        "schedule": f"every day {settings.generate_hour:02d}:{settings.generate_minute:02d}",
        "timezone": settings.timezone,
        "next_run_time": next_run.isoformat() if next_run else None,
        "last_run_time": status["last_run_time"].isoformat() if status["last_run_time"] else None,
        "last_run_success": status["success"],
        "last_run_stats": status["stats"],
        "last_run_error": status["error"],
    }
