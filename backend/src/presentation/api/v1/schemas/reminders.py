"""
Reminder Schemas
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr

from domain.entities import ScheduledReminder


class ReminderRequest(BaseModel):
    """Application to remind about and where to send it"""

    company_id: UUID
    email: EmailStr


class ReminderResponse(BaseModel):
    """Scheduled reminder response"""

    id: str
    application_id: str
    recipient: str
    send_time: datetime
    status: str
    attempts: int
    max_attempts: int
    last_error: Optional[str] = None
    failure_reason: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, reminder: ScheduledReminder) -> "ReminderResponse":
        return cls(
            id=str(reminder.id),
            application_id=str(reminder.application_id),
            recipient=str(reminder.recipient),
            send_time=reminder.send_time,
            status=reminder.status.value,
            attempts=reminder.attempts,
            max_attempts=reminder.max_attempts,
            last_error=reminder.last_error,
            failure_reason=reminder.failure_reason.value if reminder.failure_reason else None,
            sent_at=reminder.sent_at,
            created_at=reminder.created_at,
        )


class NotifyResponse(BaseModel):
    """Immediate notification result"""

    message: str
    company_id: str
    recipient: str
