"""
Company Application Domain Entity
Immutable record of one job application and its dates
"""
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Optional
from uuid import UUID

END_OF_DAY = time(23, 59, 59, 999000)

REQUIRED_TEXT_FIELDS = ("company", "role", "location", "ctc")


def default_deadline(created_at: datetime) -> datetime:
    """Deadline used when none is given: 23:59:59.999 UTC of the creation day"""
    day = created_at.astimezone(timezone.utc).date()
    return datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CompanyApplication:
    """Company application domain entity - immutable"""

    id: UUID
    owner_id: UUID

    # Application details
    company: str
    role: str
    location: str
    ctc: str
    deadline: datetime

    # Online assessment
    oa_date: Optional[datetime] = None
    oa_mode: Optional[str] = None

    # Interview
    interview_date: Optional[datetime] = None
    interview_mode: Optional[str] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate application data"""
        for name in REQUIRED_TEXT_FIELDS:
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValueError(f"{name.capitalize()} is required")
        if self.deadline is None:
            raise ValueError("Deadline is required")

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.owner_id == user_id

    def deadline_passed(self, now: datetime) -> bool:
        return self.deadline <= now

    def __str__(self) -> str:
        return f"CompanyApplication({self.company}, role={self.role})"
