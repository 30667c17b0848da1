"""
User Repository Implementation
SQLAlchemy-based user repository
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from core.clock import ensure_utc, utc_now
from core.exceptions import RepositoryException
from domain.entities import User
from domain.value_objects import Handle
from application.repositories.interfaces import IUserRepository
from infrastructure.persistence.models.user import UserModel


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        try:
            model = await self._get_model(user_id)
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_handle(self, handle: str) -> Optional[User]:
        """Get user by handle"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.handle == handle.strip().lower())
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by handle {handle}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def exists_by_handle(self, handle: str) -> bool:
        """Check if user exists by handle"""
        return await self.get_by_handle(handle) is not None

    async def create(self, user: User) -> User:
        """Create new user"""
        try:
            model = UserModel(
                id=user.id,
                handle=str(user.handle),
                password_hash=user.password_hash,
                created_at=user.created_at or utc_now(),
                updated_at=user.updated_at or user.created_at or utc_now(),
                last_login_at=user.last_login_at,
            )
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except SQLAlchemyError as e:
            logger.error(f"Failed to create user {user.handle}: {str(e)}")
            raise RepositoryException(f"Failed to create user: {str(e)}")

    async def update_last_login(self, user_id: UUID, when: datetime) -> Optional[User]:
        """Stamp a successful login"""
        try:
            model = await self._get_model(user_id)
            if not model:
                return None

            model.last_login_at = when
            model.updated_at = when
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except SQLAlchemyError as e:
            logger.error(f"Failed to update last login for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to update user: {str(e)}")

    async def _get_model(self, user_id: UUID) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            handle=Handle(model.handle),
            password_hash=model.password_hash,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
            last_login_at=ensure_utc(model.last_login_at),
        )
