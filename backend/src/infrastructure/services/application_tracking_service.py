"""
ApplicationTrackingService Implementation
CRUD over company applications plus reminder bookkeeping on create/edit
"""
from dataclasses import replace
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from application.services.application_tracking import IApplicationTrackingService
from application.repositories.interfaces import (
    ICompanyApplicationRepository,
    IScheduledReminderRepository,
)
from core.clock import Clock, utc_now
from core.exceptions import ResourceNotFoundException, ValidationException
from core.logging_config import logger
from domain.entities import (
    CompanyApplication,
    ScheduledReminder,
    default_deadline,
    derive_send_time,
)
from domain.value_objects import Email

EDITABLE_FIELDS = frozenset({
    "company",
    "role",
    "location",
    "ctc",
    "deadline",
    "oa_date",
    "oa_mode",
    "interview_date",
    "interview_mode",
})


class ApplicationTrackingService(IApplicationTrackingService):
    """Application tracking service for a user's company applications"""

    def __init__(
        self,
        application_repository: ICompanyApplicationRepository,
        reminder_repository: IScheduledReminderRepository,
        session: AsyncSession,
        lead_time: timedelta = timedelta(hours=1),
        max_attempts: int = 10,
        reschedule_on_deadline_change: bool = True,
        clock: Clock = utc_now,
    ):
        """
        Initialize application tracking service

        Args:
            application_repository: Company application repository
            reminder_repository: Scheduled reminder repository
            session: Unit of work committed after each write
            lead_time: How long before the deadline reminders fire
            max_attempts: Delivery attempts before a reminder is abandoned
            reschedule_on_deadline_change: Re-derive pending reminders on deadline edits
            clock: Source of the current time
        """
        self.application_repo = application_repository
        self.reminder_repo = reminder_repository
        self.session = session
        self.lead_time = lead_time
        self.max_attempts = max_attempts
        self.reschedule_on_deadline_change = reschedule_on_deadline_change
        self.clock = clock

    async def list_applications(self, owner_id: UUID) -> List[CompanyApplication]:
        applications = await self.application_repo.list_by_owner(owner_id)
        logger.info(f"Found {len(applications)} applications for user {owner_id}")
        return applications

    async def create_application(
        self,
        owner_id: UUID,
        details: Dict[str, Any],
        reminder_email: Optional[str] = None,
    ) -> Tuple[CompanyApplication, Optional[ScheduledReminder]]:
        now = self.clock()
        fields = self._editable(details)
        if fields.get("deadline") is None:
            fields["deadline"] = default_deadline(now)

        recipient = _parse_email(reminder_email) if reminder_email else None

        try:
            application = CompanyApplication(
                id=uuid4(),
                owner_id=owner_id,
                created_at=now,
                updated_at=now,
                **fields,
            )
        except ValueError as e:
            raise ValidationException("application", str(e))

        created = await self.application_repo.create(application)

        reminder = None
        if recipient is not None:
            reminder = await self.reminder_repo.create(
                ScheduledReminder.schedule(
                    created.id,
                    created.deadline,
                    recipient,
                    self.lead_time,
                    now,
                    max_attempts=self.max_attempts,
                )
            )
            logger.info(f"Reminder {reminder.id} scheduled for {reminder.send_time.isoformat()}")

        await self.session.commit()
        logger.info(f"Application {created.id} created for user {owner_id}: {created.company}")
        return created, reminder

    async def get_application(self, owner_id: UUID, application_id: UUID) -> CompanyApplication:
        application = await self.application_repo.get_owned(application_id, owner_id)
        if not application:
            raise ResourceNotFoundException("Application", str(application_id))
        return application

    async def update_application(
        self,
        owner_id: UUID,
        application_id: UUID,
        changes: Dict[str, Any],
    ) -> CompanyApplication:
        current = await self.get_application(owner_id, application_id)
        now = self.clock()

        try:
            edited = replace(current, updated_at=now, **self._editable(changes))
        except ValueError as e:
            raise ValidationException("application", str(e))

        updated = await self.application_repo.update(edited)
        if not updated:
            raise ResourceNotFoundException("Application", str(application_id))

        if updated.deadline != current.deadline and self.reschedule_on_deadline_change:
            await self._reschedule_pending(updated, now)

        await self.session.commit()
        logger.info(f"Application {application_id} updated: {sorted(changes)}")
        return updated

    async def delete_application(self, owner_id: UUID, application_id: UUID) -> None:
        deleted = await self.application_repo.delete_owned(application_id, owner_id)
        if not deleted:
            raise ResourceNotFoundException("Application", str(application_id))

        await self.session.commit()
        logger.info(f"Application {application_id} deleted by user {owner_id}")

    async def _reschedule_pending(self, application: CompanyApplication, now) -> None:
        send_time = derive_send_time(application.deadline, self.lead_time)
        pending = await self.reminder_repo.list_pending_for_application(application.id)
        for reminder in pending:
            await self.reminder_repo.save(reminder.reschedule(send_time, now))
        if pending:
            logger.info(
                f"Rescheduled {len(pending)} pending reminder(s) of {application.id} "
                f"to {send_time.isoformat()}"
            )

    @staticmethod
    def _editable(values: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(values) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(sorted(unknown)[0], "Field cannot be set")
        return dict(values)


def _parse_email(value: str) -> Email:
    try:
        return Email(value)
    except ValueError as e:
        raise ValidationException("email", str(e))
