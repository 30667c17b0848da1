"""
ReminderService Implementation
Schedules reminders and sends on-demand notifications
"""
from datetime import timedelta
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from application.services.reminders import IReminderService
from application.services.notifications import IEmailTransport, build_reminder_message
from application.repositories.interfaces import (
    ICompanyApplicationRepository,
    IScheduledReminderRepository,
)
from core.clock import Clock, utc_now
from core.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from core.logging_config import logger
from domain.entities import CompanyApplication, ScheduledReminder
from domain.value_objects import Email


class ReminderService(IReminderService):
    """Reminder service for scheduling and immediate notification"""

    def __init__(
        self,
        application_repository: ICompanyApplicationRepository,
        reminder_repository: IScheduledReminderRepository,
        transport: IEmailTransport,
        session: AsyncSession,
        lead_time: timedelta = timedelta(hours=1),
        max_attempts: int = 10,
        sender_name: str = "TrackerPro",
        clock: Clock = utc_now,
    ):
        self.application_repo = application_repository
        self.reminder_repo = reminder_repository
        self.transport = transport
        self.session = session
        self.lead_time = lead_time
        self.max_attempts = max_attempts
        self.sender_name = sender_name
        self.clock = clock

    async def schedule_reminder(
        self,
        owner_id: UUID,
        application_id: UUID,
        email: str,
    ) -> ScheduledReminder:
        recipient = self._parse_email(email)
        application = await self._resolve(owner_id, application_id)

        reminder = await self.reminder_repo.create(
            ScheduledReminder.schedule(
                application.id,
                application.deadline,
                recipient,
                self.lead_time,
                self.clock(),
                max_attempts=self.max_attempts,
            )
        )
        await self.session.commit()

        logger.info(
            f"Reminder {reminder.id} for {application.company} scheduled at "
            f"{reminder.send_time.isoformat()} to {recipient}"
        )
        return reminder

    async def list_reminders(self, owner_id: UUID) -> List[ScheduledReminder]:
        return await self.reminder_repo.list_for_owner(owner_id)

    async def notify_now(
        self,
        owner_id: UUID,
        application_id: UUID,
        email: str,
    ) -> CompanyApplication:
        recipient = self._parse_email(email)
        application = await self._resolve(owner_id, application_id)

        message = build_reminder_message(
            application.company,
            application.deadline,
            role=application.role,
            sender_name=self.sender_name,
        )
        await self.transport.send(str(recipient), message.subject, message.body)

        logger.info(f"Immediate reminder for {application.company} sent to {recipient}")
        return application

    async def _resolve(self, owner_id: UUID, application_id: UUID) -> CompanyApplication:
        application = await self.application_repo.get_by_id(application_id)
        if not application:
            raise ResourceNotFoundException("Application", str(application_id))
        if not application.is_owned_by(owner_id):
            logger.warning(f"User {owner_id} denied access to application {application_id}")
            raise AuthorizationException("You do not have access to this application")
        return application

    @staticmethod
    def _parse_email(value: str) -> Email:
        try:
            return Email(value)
        except ValueError as e:
            raise ValidationException("email", str(e))
