"""
Reminder email content
"""
from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional

from core.clock import ensure_utc

DEADLINE_FORMAT = "%A, %d %B %Y at %H:%M UTC"


@dataclass(frozen=True)
class ReminderMessage:
    subject: str
    body: str


def format_deadline(deadline: datetime) -> str:
    return ensure_utc(deadline).strftime(DEADLINE_FORMAT)


def build_reminder_message(
    company: str,
    deadline: datetime,
    role: Optional[str] = None,
    sender_name: str = "TrackerPro",
) -> ReminderMessage:
    """Subject and HTML body of a deadline reminder"""
    role_line = f"<p><strong>Role:</strong> {escape(role)}</p>" if role else ""
    body = (
        "<p>Hi there,</p>"
        f"<p>This is a reminder that your application deadline for "
        f"<strong>{escape(company)}</strong> is approaching.</p>"
        f"{role_line}"
        f"<p><strong>Deadline:</strong> {format_deadline(deadline)}</p>"
        "<p>Good luck!</p>"
        f"<p>Best,<br>The {escape(sender_name)} Team</p>"
    )
    return ReminderMessage(
        subject=f"Reminder: Application Deadline for {company}",
        body=body,
    )
