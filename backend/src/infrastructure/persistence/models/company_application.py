"""
CompanyApplication ORM Model
SQLAlchemy model for tracked company applications
"""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from core.database import Base


class CompanyApplicationModel(Base):
    """Company applications table"""

    __tablename__ = "company_applications"

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Foreign Key
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Application details
    company = Column(String(255), nullable=False, index=True)
    role = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    ctc = Column(String(100), nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False, index=True)

    # Online assessment
    oa_date = Column(DateTime(timezone=True), nullable=True)
    oa_mode = Column(String(100), nullable=True)

    # Interview
    interview_date = Column(DateTime(timezone=True), nullable=True)
    interview_mode = Column(String(100), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<CompanyApplicationModel {self.id} - {self.company}>"
