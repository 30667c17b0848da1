"""
Application Tracking Service Interface
CRUD over a user's company applications
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from domain.entities import CompanyApplication, ScheduledReminder


class IApplicationTrackingService(ABC):
    """Application tracking service interface"""

    @abstractmethod
    async def list_applications(self, owner_id: UUID) -> List[CompanyApplication]:
        """Get the user's applications, nearest deadline first"""
        pass

    @abstractmethod
    async def create_application(
        self,
        owner_id: UUID,
        details: Dict[str, Any],
        reminder_email: Optional[str] = None,
    ) -> Tuple[CompanyApplication, Optional[ScheduledReminder]]:
        """
        Create an application, optionally scheduling a reminder for it

        Args:
            owner_id: User ID
            details: company, role, location, ctc and optional dates/modes;
                a missing deadline defaults to the end of the current day
            reminder_email: Recipient of a deadline reminder

        Returns:
            Tuple of (created application, scheduled reminder or None)
        """
        pass

    @abstractmethod
    async def get_application(self, owner_id: UUID, application_id: UUID) -> CompanyApplication:
        """
        Get one application of the user

        Raises:
            ResourceNotFoundException: missing or owned by another user
        """
        pass

    @abstractmethod
    async def update_application(
        self,
        owner_id: UUID,
        application_id: UUID,
        changes: Dict[str, Any],
    ) -> CompanyApplication:
        """
        Apply a partial update

        A deadline change re-derives the send time of pending reminders
        when rescheduling is enabled.
        """
        pass

    @abstractmethod
    async def delete_application(self, owner_id: UUID, application_id: UUID) -> None:
        """Delete an application; its reminders are left for the scheduler"""
        pass
