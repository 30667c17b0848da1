"""Domain Entities - Core business objects"""

from .user import User
from .company_application import CompanyApplication, default_deadline
from .scheduled_reminder import ScheduledReminder, derive_send_time
__all__ = [
    "User",
    "CompanyApplication",
    "ScheduledReminder",
    "default_deadline",
    "derive_send_time",
]
