"""
Reminder Status Enum
Lifecycle states of a scheduled reminder
"""
from enum import Enum


class ReminderStatus(str, Enum):
    """Scheduled reminder status"""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"        # owning application is gone
    ABANDONED = "abandoned"  # delivery failed max_attempts times

    @property
    def is_terminal(self) -> bool:
        return self is not ReminderStatus.PENDING


class ReminderFailureReason(str, Enum):
    """Why a reminder reached a terminal non-sent state"""
    APPLICATION_NOT_FOUND = "application_not_found"
    MAX_ATTEMPTS_EXCEEDED = "max_attempts_exceeded"
