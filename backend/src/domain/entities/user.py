"""
User Domain Entity
Immutable user business object
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..value_objects import Handle


@dataclass(frozen=True)
class User:
    """User domain entity - immutable"""

    id: UUID
    handle: Handle
    password_hash: str = field(repr=False)

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate user data"""
        if not self.password_hash:
            raise ValueError("Password hash cannot be empty")

    def with_login(self, when: datetime) -> "User":
        """Copy of this user stamped with a successful login"""
        return replace(self, last_login_at=when, updated_at=when)

    def __str__(self) -> str:
        return f"User({self.handle})"
