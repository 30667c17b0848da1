"""
Company Application Schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from core.clock import ensure_utc
from domain.entities import CompanyApplication


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class CompanyCreateRequest(BaseModel):
    """Create a company application"""

    company: str = Field(..., max_length=200, examples=["Acme Corp"])
    role: str = Field(..., max_length=200, examples=["Backend Engineer"])
    location: str = Field(..., max_length=200, examples=["Remote"])
    ctc: str = Field(..., max_length=100, examples=["12 LPA"])
    deadline: Optional[datetime] = Field(
        None, description="Defaults to the end of the current day (UTC)"
    )
    oa_date: Optional[datetime] = None
    oa_mode: Optional[str] = Field(None, max_length=50)
    interview_date: Optional[datetime] = None
    interview_mode: Optional[str] = Field(None, max_length=50)
    reminder_email: Optional[EmailStr] = Field(
        None, description="Schedule a deadline reminder to this address"
    )

    @field_validator("company", "role", "location", "ctc")
    @classmethod
    def strip_required(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    @field_validator("deadline", "oa_date", "interview_date")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are taken as UTC"""
        return ensure_utc(v)

    def details(self) -> dict:
        return self.model_dump(exclude={"reminder_email"}, exclude_none=True)


class CompanyUpdateRequest(BaseModel):
    """Partial update; only fields present in the body change"""

    company: Optional[str] = Field(None, max_length=200)
    role: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    ctc: Optional[str] = Field(None, max_length=100)
    deadline: Optional[datetime] = None
    oa_date: Optional[datetime] = None
    oa_mode: Optional[str] = Field(None, max_length=50)
    interview_date: Optional[datetime] = None
    interview_mode: Optional[str] = Field(None, max_length=50)

    @field_validator("company", "role", "location", "ctc")
    @classmethod
    def strip_required(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    @field_validator("deadline", "oa_date", "interview_date")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CompanyResponse(BaseModel):
    """Company application response"""

    id: str
    company: str
    role: str
    location: str
    ctc: str
    deadline: datetime
    oa_date: Optional[datetime] = None
    oa_mode: Optional[str] = None
    interview_date: Optional[datetime] = None
    interview_mode: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reminder_id: Optional[str] = None

    @classmethod
    def from_entity(
        cls,
        application: CompanyApplication,
        reminder_id: Optional[str] = None,
    ) -> "CompanyResponse":
        return cls(
            id=str(application.id),
            company=application.company,
            role=application.role,
            location=application.location,
            ctc=application.ctc,
            deadline=application.deadline,
            oa_date=application.oa_date,
            oa_mode=application.oa_mode,
            interview_date=application.interview_date,
            interview_mode=application.interview_mode,
            created_at=application.created_at,
            updated_at=application.updated_at,
            reminder_id=reminder_id,
        )
