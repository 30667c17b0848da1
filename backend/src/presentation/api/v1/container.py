"""
Dependency Injection Container
Manages service and repository instances
"""
from datetime import timedelta

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.database import get_db
from application.repositories.interfaces import (
    IUserRepository,
    ICompanyApplicationRepository,
    IScheduledReminderRepository,
)
from application.services.auth.interfaces import IAuthService, IJwtService, IPasswordHasher
from application.services.application_tracking import IApplicationTrackingService
from application.services.notifications import IEmailTransport
from application.services.reminder_scheduler import ReminderScheduler
from application.services.reminders import IReminderService
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.persistence.repositories.company_application import (
    SQLAlchemyCompanyApplicationRepository,
)
from infrastructure.persistence.repositories.scheduled_reminder import (
    SQLAlchemyScheduledReminderRepository,
)
from infrastructure.security.password_hasher import BcryptPasswordHasher
from infrastructure.security.jwt_service import JwtService


# Singleton instances
_password_hasher: IPasswordHasher | None = None


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with"""
    return request.app.state.settings


def get_password_hasher() -> IPasswordHasher:
    """Get password hasher instance (singleton)"""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher()
    return _password_hasher


def get_jwt_service(config: Settings = Depends(get_app_settings)) -> IJwtService:
    """Get JWT service instance bound to the app settings"""
    return JwtService.from_settings(config)


def get_email_transport(request: Request) -> IEmailTransport:
    """Get the transport built at startup"""
    return request.app.state.email_transport


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    """Get the scheduler built at startup"""
    return request.app.state.reminder_scheduler


def get_user_repository(
    session: AsyncSession = Depends(get_db)
) -> IUserRepository:
    """Get user repository instance (per-request)"""
    return SQLAlchemyUserRepository(session)


def get_application_repository(
    session: AsyncSession = Depends(get_db)
) -> ICompanyApplicationRepository:
    """Get company application repository instance (per-request)"""
    return SQLAlchemyCompanyApplicationRepository(session)


def get_reminder_repository(
    session: AsyncSession = Depends(get_db)
) -> IScheduledReminderRepository:
    """Get scheduled reminder repository instance (per-request)"""
    return SQLAlchemyScheduledReminderRepository(session)


def get_auth_service(
    session: AsyncSession = Depends(get_db),
    user_repo: IUserRepository = Depends(get_user_repository),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    jwt_service: IJwtService = Depends(get_jwt_service),
) -> IAuthService:
    """Get auth service instance (per-request)"""
    from application.services.auth.impl import AuthService
    return AuthService(user_repo, password_hasher, jwt_service, session)


def get_application_tracking_service(
    session: AsyncSession = Depends(get_db),
    application_repo: ICompanyApplicationRepository = Depends(get_application_repository),
    reminder_repo: IScheduledReminderRepository = Depends(get_reminder_repository),
    config: Settings = Depends(get_app_settings),
) -> IApplicationTrackingService:
    """Get application tracking service instance (per-request)"""
    from infrastructure.services.application_tracking_service import ApplicationTrackingService
    return ApplicationTrackingService(
        application_repo,
        reminder_repo,
        session,
        lead_time=timedelta(minutes=config.REMINDER_LEAD_TIME_MINUTES),
        max_attempts=config.REMINDER_MAX_ATTEMPTS,
        reschedule_on_deadline_change=config.REMINDER_RESCHEDULE_ON_DEADLINE_CHANGE,
    )


def get_reminder_service(
    session: AsyncSession = Depends(get_db),
    application_repo: ICompanyApplicationRepository = Depends(get_application_repository),
    reminder_repo: IScheduledReminderRepository = Depends(get_reminder_repository),
    transport: IEmailTransport = Depends(get_email_transport),
    config: Settings = Depends(get_app_settings),
) -> IReminderService:
    """Get reminder service instance (per-request)"""
    from infrastructure.services.reminder_service import ReminderService
    return ReminderService(
        application_repo,
        reminder_repo,
        transport,
        session,
        lead_time=timedelta(minutes=config.REMINDER_LEAD_TIME_MINUTES),
        max_attempts=config.REMINDER_MAX_ATTEMPTS,
        sender_name=config.SMTP_FROM_NAME,
    )
