"""
ScheduledReminder ORM Model
SQLAlchemy model for deadline reminder emails
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, Text, Index, Uuid, Enum as SQLEnum
from sqlalchemy.sql import func

from core.database import Base
from domain.value_objects import ReminderStatus, ReminderFailureReason


class ScheduledReminderModel(Base):
    """Scheduled reminders table"""

    __tablename__ = "scheduled_reminders"
    __table_args__ = (
        # Serves the scheduler's due query
        Index("ix_scheduled_reminders_status_send_time", "status", "send_time"),
    )

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # No FK: deleting an application leaves its reminders for the scheduler to fail
    application_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    # Delivery
    recipient = Column(String(320), nullable=False)
    send_time = Column(DateTime(timezone=True), nullable=False)
    status = Column(SQLEnum(ReminderStatus), nullable=False, default=ReminderStatus.PENDING)

    # Retry Logic
    attempts = Column(Integer, nullable=False, default=0)
    max_attempts = Column(Integer, nullable=False, default=10)

    # Error Tracking
    last_error = Column(Text, nullable=True)
    failure_reason = Column(SQLEnum(ReminderFailureReason), nullable=True)

    # Timestamps
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ScheduledReminderModel {self.id} - {self.status.value}>"
