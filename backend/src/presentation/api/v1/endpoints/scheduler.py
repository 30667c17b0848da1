"""
Scheduler Trigger Endpoint
Runs one reminder batch cycle for external cron platforms
"""
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from presentation.api.v1.schemas.scheduler import BatchReportResponse
from presentation.api.v1.container import get_reminder_scheduler
from presentation.api.v1.dependencies import verify_cron_secret
from application.services.reminder_scheduler import ReminderScheduler
from core.exceptions import RepositoryException


router = APIRouter()


@router.post(
    "/scheduler/run",
    response_model=BatchReportResponse,
    dependencies=[Depends(verify_cron_secret)],
)
async def run_scheduler_cycle(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Run exactly one batch cycle"""
    try:
        report = await scheduler.run_cycle()
    except RepositoryException as e:
        logger.error(f"Triggered reminder cycle aborted: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reminder store unavailable",
        )
    return BatchReportResponse.from_report(report)
