"""
Authentication Service Interfaces
Abstract base classes for authentication services
"""
from abc import ABC, abstractmethod
from typing import Dict
from uuid import UUID

from domain.entities import User


class IPasswordHasher(ABC):
    """Password hashing interface"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        pass


class IJwtService(ABC):
    """JWT token service interface"""

    @abstractmethod
    def create_access_token(self, user_id: UUID) -> str:
        """Create access token"""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Dict:
        """
        Verify and decode token

        Raises:
            AuthenticationException: if the token is invalid or expired
        """
        pass


class IAuthService(ABC):
    """Authentication service interface"""

    @abstractmethod
    async def signup(self, handle: str, password: str) -> User:
        """
        Register a new user

        Raises:
            ValidationException: bad handle or password too short
            DuplicateResourceException: handle already taken
        """
        pass

    @abstractmethod
    async def login(self, handle: str, password: str) -> User:
        """
        Authenticate user and stamp the login time

        Raises:
            AuthenticationException: unknown handle or wrong password
        """
        pass

    @abstractmethod
    def issue_token(self, user: User) -> str:
        """Bearer token for an authenticated user"""
        pass

    @abstractmethod
    async def verify_access_token(self, token: str) -> User:
        """
        Resolve a bearer token to its user

        Raises:
            AuthenticationException: bad token or user no longer exists
        """
        pass
