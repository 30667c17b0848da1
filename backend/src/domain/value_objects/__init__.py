"""Value Objects - Immutable objects defined by their attributes"""

from .email import Email
from .handle import Handle
from .reminder_status import ReminderStatus, ReminderFailureReason
__all__ = [
    "Email",
    "Handle",
    "ReminderStatus",
    "ReminderFailureReason",
]
