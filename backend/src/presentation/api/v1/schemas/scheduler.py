"""
Scheduler Trigger Schemas
"""
from datetime import datetime

from pydantic import BaseModel

from application.services.reminder_scheduler import BatchReport


class BatchReportResponse(BaseModel):
    """Outcome of one reminder batch cycle"""

    started_at: datetime
    considered: int
    sent: int
    failed: int
    retried: int
    abandoned: int
    skipped: int
    errors: int

    @classmethod
    def from_report(cls, report: BatchReport) -> "BatchReportResponse":
        return cls(
            started_at=report.started_at,
            considered=report.considered,
            sent=report.sent,
            failed=report.failed,
            retried=report.retried,
            abandoned=report.abandoned,
            skipped=report.skipped,
            errors=report.errors,
        )
