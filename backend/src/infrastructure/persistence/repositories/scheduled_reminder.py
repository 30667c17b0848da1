"""
ScheduledReminder Repository Implementation
Repository for reminder records consumed by the scheduler
"""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, update, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from core.clock import ensure_utc, utc_now
from core.exceptions import RepositoryException
from domain.entities import ScheduledReminder
from domain.value_objects import Email, ReminderStatus
from application.repositories.interfaces import IScheduledReminderRepository
from infrastructure.persistence.models.company_application import CompanyApplicationModel
from infrastructure.persistence.models.scheduled_reminder import ScheduledReminderModel


class SQLAlchemyScheduledReminderRepository(IScheduledReminderRepository):
    """Repository for ScheduledReminder operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, reminder_id: UUID) -> Optional[ScheduledReminder]:
        """Get a reminder by its ID"""
        try:
            result = await self.session.execute(
                select(ScheduledReminderModel)
                .where(ScheduledReminderModel.id == reminder_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get reminder {reminder_id}: {str(e)}")
            raise RepositoryException(f"Failed to get reminder: {str(e)}")

    async def create(self, reminder: ScheduledReminder) -> ScheduledReminder:
        """Create a new reminder"""
        try:
            created_at = reminder.created_at or utc_now()
            model = ScheduledReminderModel(
                id=reminder.id,
                application_id=reminder.application_id,
                recipient=str(reminder.recipient),
                send_time=reminder.send_time,
                status=reminder.status,
                attempts=reminder.attempts,
                max_attempts=reminder.max_attempts,
                last_error=reminder.last_error,
                failure_reason=reminder.failure_reason,
                sent_at=reminder.sent_at,
                created_at=created_at,
                updated_at=reminder.updated_at or created_at,
            )
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except SQLAlchemyError as e:
            logger.error(f"Failed to create reminder for application {reminder.application_id}: {str(e)}")
            raise RepositoryException(f"Failed to create reminder: {str(e)}")

    async def save(self, reminder: ScheduledReminder) -> bool:
        """Persist the state of a reminder that is still pending

        Returns False instead of raising when the row was deleted meanwhile
        or has already reached a terminal status.
        """
        try:
            result = await self.session.execute(
                update(ScheduledReminderModel)
                .where(
                    ScheduledReminderModel.id == reminder.id,
                    ScheduledReminderModel.status == ReminderStatus.PENDING,
                )
                .values(
                    send_time=reminder.send_time,
                    status=reminder.status,
                    attempts=reminder.attempts,
                    last_error=reminder.last_error,
                    failure_reason=reminder.failure_reason,
                    sent_at=reminder.sent_at,
                    updated_at=reminder.updated_at or utc_now(),
                )
                .execution_options(synchronize_session=False)
            )
            await self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Failed to save reminder {reminder.id}: {str(e)}")
            raise RepositoryException(f"Failed to save reminder: {str(e)}")

    async def save_outcome(self, reminder: ScheduledReminder) -> bool:
        """Record a delivery outcome without touching the schedule

        The row must still be pending at ``reminder.send_time``. A row that
        another cycle already finished, or that was rescheduled while the
        send was in flight, is left alone and False is returned.
        """
        try:
            result = await self.session.execute(
                update(ScheduledReminderModel)
                .where(
                    ScheduledReminderModel.id == reminder.id,
                    ScheduledReminderModel.status == ReminderStatus.PENDING,
                    ScheduledReminderModel.send_time == reminder.send_time,
                )
                .values(
                    status=reminder.status,
                    attempts=reminder.attempts,
                    last_error=reminder.last_error,
                    failure_reason=reminder.failure_reason,
                    sent_at=reminder.sent_at,
                    updated_at=reminder.updated_at or utc_now(),
                )
                .execution_options(synchronize_session=False)
            )
            await self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Failed to record outcome of reminder {reminder.id}: {str(e)}")
            raise RepositoryException(f"Failed to record reminder outcome: {str(e)}")

    async def find_due(self, now: datetime, limit: int) -> List[ScheduledReminder]:
        """Get pending reminders whose send time has passed, most overdue first"""
        try:
            result = await self.session.execute(
                select(ScheduledReminderModel)
                .where(
                    ScheduledReminderModel.status == ReminderStatus.PENDING,
                    ScheduledReminderModel.send_time <= now,
                )
                .order_by(ScheduledReminderModel.send_time.asc(), ScheduledReminderModel.created_at.asc())
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Failed to query due reminders: {str(e)}")
            raise RepositoryException(f"Failed to query due reminders: {str(e)}")

    async def list_pending_for_application(self, application_id: UUID) -> List[ScheduledReminder]:
        """Get pending reminders of one application"""
        try:
            result = await self.session.execute(
                select(ScheduledReminderModel)
                .where(
                    and_(
                        ScheduledReminderModel.application_id == application_id,
                        ScheduledReminderModel.status == ReminderStatus.PENDING,
                    )
                )
                .order_by(ScheduledReminderModel.created_at.asc())
                .execution_options(populate_existing=True)
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Failed to list reminders of application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to list reminders: {str(e)}")

    async def list_for_owner(self, owner_id: UUID, limit: int = 100) -> List[ScheduledReminder]:
        """Get reminders attached to a user's applications, soonest first"""
        try:
            result = await self.session.execute(
                select(ScheduledReminderModel)
                .join(
                    CompanyApplicationModel,
                    CompanyApplicationModel.id == ScheduledReminderModel.application_id,
                )
                .where(CompanyApplicationModel.owner_id == owner_id)
                .order_by(ScheduledReminderModel.send_time.asc())
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Failed to list reminders for user {owner_id}: {str(e)}")
            raise RepositoryException(f"Failed to list reminders: {str(e)}")

    @staticmethod
    def _to_entity(model: ScheduledReminderModel) -> ScheduledReminder:
        return ScheduledReminder(
            id=model.id,
            application_id=model.application_id,
            recipient=Email(model.recipient),
            send_time=ensure_utc(model.send_time),
            status=model.status,
            attempts=model.attempts,
            max_attempts=model.max_attempts,
            last_error=model.last_error,
            failure_reason=model.failure_reason,
            sent_at=ensure_utc(model.sent_at),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
