"""
Scheduled Reminder Domain Entity
Immutable reminder with explicit state transitions
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from ..value_objects import Email, ReminderStatus, ReminderFailureReason


def derive_send_time(deadline: datetime, lead_time: timedelta) -> datetime:
    """When a reminder for ``deadline`` should fire"""
    if lead_time < timedelta(0):
        raise ValueError("Lead time cannot be negative")
    return deadline - lead_time


@dataclass(frozen=True)
class ScheduledReminder:
    """
    Scheduled reminder domain entity - immutable

    State is one of:
      PENDING (attempts = failed deliveries so far)
      SENT
      FAILED (failure_reason set; owning application missing)
      ABANDONED (delivery failed max_attempts times)

    Transition methods return new instances; terminal states are final.
    """

    id: UUID
    application_id: UUID
    recipient: Email
    send_time: datetime
    status: ReminderStatus = ReminderStatus.PENDING

    # Delivery attempts
    attempts: int = 0
    max_attempts: int = 10
    last_error: Optional[str] = None
    failure_reason: Optional[ReminderFailureReason] = None
    sent_at: Optional[datetime] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate reminder data"""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.attempts < 0:
            raise ValueError("attempts cannot be negative")

    @classmethod
    def schedule(
        cls,
        application_id: UUID,
        deadline: datetime,
        recipient: Email,
        lead_time: timedelta,
        now: datetime,
        max_attempts: int = 10,
    ) -> "ScheduledReminder":
        """New pending reminder firing ``lead_time`` before ``deadline``"""
        return cls(
            id=uuid4(),
            application_id=application_id,
            recipient=recipient,
            send_time=derive_send_time(deadline, lead_time),
            max_attempts=max_attempts,
            created_at=now,
            updated_at=now,
        )

    def is_pending(self) -> bool:
        return self.status == ReminderStatus.PENDING

    def is_due(self, now: datetime) -> bool:
        return self.is_pending() and self.send_time <= now

    def _require_pending(self, action: str) -> None:
        if not self.is_pending():
            raise ValueError(f"Cannot {action} reminder {self.id} in status {self.status.value}")

    def mark_sent(self, now: datetime) -> "ScheduledReminder":
        self._require_pending("send")
        return replace(
            self,
            status=ReminderStatus.SENT,
            sent_at=now,
            last_error=None,
            updated_at=now,
        )

    def mark_failed(self, reason: ReminderFailureReason, now: datetime) -> "ScheduledReminder":
        self._require_pending("fail")
        return replace(
            self,
            status=ReminderStatus.FAILED,
            failure_reason=reason,
            updated_at=now,
        )

    def record_failed_attempt(self, error: str, now: datetime) -> "ScheduledReminder":
        """Count a transient delivery failure; abandon once max_attempts is reached"""
        self._require_pending("retry")
        attempts = self.attempts + 1
        if attempts >= self.max_attempts:
            return replace(
                self,
                attempts=attempts,
                last_error=error,
                status=ReminderStatus.ABANDONED,
                failure_reason=ReminderFailureReason.MAX_ATTEMPTS_EXCEEDED,
                updated_at=now,
            )
        return replace(self, attempts=attempts, last_error=error, updated_at=now)

    def reschedule(self, send_time: datetime, now: datetime) -> "ScheduledReminder":
        """Move a pending reminder to a new send time and reset its attempts"""
        self._require_pending("reschedule")
        return replace(self, send_time=send_time, attempts=0, last_error=None, updated_at=now)

    def __str__(self) -> str:
        return f"ScheduledReminder({self.id}, status={self.status.value})"
