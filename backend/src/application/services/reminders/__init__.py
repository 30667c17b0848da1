"""
Reminder Service Interface
Scheduling and immediate sending of deadline reminders
"""
from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from domain.entities import CompanyApplication, ScheduledReminder


class IReminderService(ABC):
    """Reminder service interface"""

    @abstractmethod
    async def schedule_reminder(
        self,
        owner_id: UUID,
        application_id: UUID,
        email: str,
    ) -> ScheduledReminder:
        """
        Schedule a reminder ``lead time`` before the application's deadline

        Raises:
            ResourceNotFoundException: application missing
            AuthorizationException: application owned by another user
        """
        pass

    @abstractmethod
    async def list_reminders(self, owner_id: UUID) -> List[ScheduledReminder]:
        """Reminders attached to the user's applications"""
        pass

    @abstractmethod
    async def notify_now(
        self,
        owner_id: UUID,
        application_id: UUID,
        email: str,
    ) -> CompanyApplication:
        """
        Send a reminder email immediately without creating a record

        Raises:
            EmailDeliveryException: transport refused the message
        """
        pass
