"""
Authentication Service Implementation
Concrete implementation of IAuthService
"""
from uuid import UUID, uuid4

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import Clock, utc_now
from core.exceptions import (
    AuthenticationException,
    DuplicateResourceException,
    ValidationException,
)
from domain.entities import User
from domain.value_objects import Handle
from application.repositories.interfaces import IUserRepository
from .interfaces import IAuthService, IJwtService, IPasswordHasher

MIN_PASSWORD_LENGTH = 6


class AuthService(IAuthService):
    """Authentication service implementation"""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: IJwtService,
        session: AsyncSession,
        clock: Clock = utc_now,
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.session = session
        self.clock = clock

    async def signup(self, handle: str, password: str) -> User:
        """Register a new user"""

        logger.info(f"Registering new user: {handle}")

        try:
            handle_vo = Handle(handle)
        except ValueError as e:
            raise ValidationException("handle", str(e))

        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        if await self.user_repo.exists_by_handle(str(handle_vo)):
            raise DuplicateResourceException("User", "handle", str(handle_vo))

        now = self.clock()
        user = User(
            id=uuid4(),
            handle=handle_vo,
            password_hash=self.password_hasher.hash_password(password),
            created_at=now,
            updated_at=now,
        )

        created_user = await self.user_repo.create(user)
        await self.session.commit()

        logger.info(f"User registered successfully: {created_user.handle}")

        return created_user

    async def login(self, handle: str, password: str) -> User:
        """Authenticate user"""

        logger.info(f"Login attempt: {handle}")

        user = await self.user_repo.get_by_handle(handle)
        if not user:
            logger.warning(f"Login failed: User not found - {handle}")
            raise AuthenticationException("Invalid handle or password")

        if not self.password_hasher.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid password - {handle}")
            raise AuthenticationException("Invalid handle or password")

        updated = await self.user_repo.update_last_login(user.id, self.clock())
        await self.session.commit()

        logger.info(f"User logged in successfully: {user.handle}")

        return updated or user

    def issue_token(self, user: User) -> str:
        return self.jwt_service.create_access_token(user.id)

    async def verify_access_token(self, token: str) -> User:
        """Resolve a bearer token to its user"""
        payload = self.jwt_service.verify_token(token)

        try:
            user_id = UUID(payload["sub"])
        except (KeyError, ValueError):
            raise AuthenticationException("Invalid or expired token")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AuthenticationException("Invalid or expired token")
        return user
