"""
Reminder Store
SQLAlchemy-backed store handed to the reminder scheduler, one session per cycle
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.database import Database
from domain.entities import CompanyApplication, ScheduledReminder
from application.repositories.interfaces import IReminderStore
from infrastructure.persistence.repositories.company_application import (
    SQLAlchemyCompanyApplicationRepository,
)
from infrastructure.persistence.repositories.scheduled_reminder import (
    SQLAlchemyScheduledReminderRepository,
)


class SQLAlchemyReminderStore(IReminderStore):
    """Scheduler store; every save is committed on its own"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.reminders = SQLAlchemyScheduledReminderRepository(session)
        self.applications = SQLAlchemyCompanyApplicationRepository(session)

    async def find_due_reminders(self, now: datetime, limit: int) -> List[ScheduledReminder]:
        return await self.reminders.find_due(now, limit)

    async def find_application_by_id(self, application_id: UUID) -> Optional[CompanyApplication]:
        return await self.applications.get_by_id(application_id)

    async def save_reminder(self, reminder: ScheduledReminder) -> bool:
        try:
            saved = await self.reminders.save_outcome(reminder)
            await self.session.commit()
            return saved
        except Exception:
            await self.session.rollback()
            raise


def reminder_store_scope(database: Database):
    """Factory of per-cycle store scopes bound to ``database``"""

    @asynccontextmanager
    async def scope() -> AsyncIterator[IReminderStore]:
        async with database.session() as session:
            yield SQLAlchemyReminderStore(session)

    return scope
