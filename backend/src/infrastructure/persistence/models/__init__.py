"""ORM Models Package"""

from .user import UserModel
from .company_application import CompanyApplicationModel
from .scheduled_reminder import ScheduledReminderModel

__all__ = [
    "UserModel",
    "CompanyApplicationModel",
    "ScheduledReminderModel",
]
