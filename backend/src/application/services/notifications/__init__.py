"""Notification services - outbound reminder email"""

from .interfaces import IEmailTransport
from .reminder_message import ReminderMessage, build_reminder_message, format_deadline

__all__ = [
    "IEmailTransport",
    "ReminderMessage",
    "build_reminder_message",
    "format_deadline",
]
