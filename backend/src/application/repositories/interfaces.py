"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from domain.entities import User, CompanyApplication, ScheduledReminder


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_handle(self, handle: str) -> Optional[User]:
        """Get user by (case-insensitive) handle"""
        pass

    @abstractmethod
    async def exists_by_handle(self, handle: str) -> bool:
        """Check if a handle is taken"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user"""
        pass

    @abstractmethod
    async def update_last_login(self, user_id: UUID, when: datetime) -> Optional[User]:
        """Stamp a successful login"""
        pass


class ICompanyApplicationRepository(ABC):
    """Company application repository interface"""

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[CompanyApplication]:
        """Get application by ID regardless of owner"""
        pass

    @abstractmethod
    async def get_owned(self, application_id: UUID, owner_id: UUID) -> Optional[CompanyApplication]:
        """Get application only if it belongs to ``owner_id``"""
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: UUID) -> List[CompanyApplication]:
        """All applications of one user, nearest deadline first"""
        pass

    @abstractmethod
    async def create(self, application: CompanyApplication) -> CompanyApplication:
        """Create new application"""
        pass

    @abstractmethod
    async def update(self, application: CompanyApplication) -> Optional[CompanyApplication]:
        """Update existing application; None if it no longer exists"""
        pass

    @abstractmethod
    async def delete_owned(self, application_id: UUID, owner_id: UUID) -> bool:
        """Delete application if owned by ``owner_id``"""
        pass


class IScheduledReminderRepository(ABC):
    """Scheduled reminder repository interface"""

    @abstractmethod
    async def get_by_id(self, reminder_id: UUID) -> Optional[ScheduledReminder]:
        """Get reminder by ID"""
        pass

    @abstractmethod
    async def create(self, reminder: ScheduledReminder) -> ScheduledReminder:
        """Create new reminder"""
        pass

    @abstractmethod
    async def save(self, reminder: ScheduledReminder) -> bool:
        """Persist a pending reminder; False when the row is gone or no longer pending"""
        pass

    @abstractmethod
    async def save_outcome(self, reminder: ScheduledReminder) -> bool:
        """Record status, attempts and error only; False when the row changed since it was read"""
        pass

    @abstractmethod
    async def find_due(self, now: datetime, limit: int) -> List[ScheduledReminder]:
        """Pending reminders with send_time <= now, most overdue first"""
        pass

    @abstractmethod
    async def list_pending_for_application(self, application_id: UUID) -> List[ScheduledReminder]:
        """Pending reminders of one application"""
        pass

    @abstractmethod
    async def list_for_owner(self, owner_id: UUID, limit: int = 100) -> List[ScheduledReminder]:
        """Reminders attached to applications of one user"""
        pass


class IReminderStore(ABC):
    """
    Store surface used by the reminder scheduler

    ``save_reminder`` records a delivery outcome. When the record is gone
    or no longer matches the copy that was read, it returns False instead
    of raising.
    """

    @abstractmethod
    async def find_due_reminders(self, now: datetime, limit: int) -> List[ScheduledReminder]:
        pass

    @abstractmethod
    async def find_application_by_id(self, application_id: UUID) -> Optional[CompanyApplication]:
        pass

    @abstractmethod
    async def save_reminder(self, reminder: ScheduledReminder) -> bool:
        pass
