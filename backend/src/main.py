"""Main FastAPI Application

Application factory for the deadline tracker API. Wires middleware,
global exception handlers, the API routers from `presentation`, and the
background reminder worker.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `core`, and
`infrastructure` to preserve a clean architecture.
"""
import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from core.clock import Clock, utc_now
from core.config import Settings, settings
from core.database import Database
from core.logging_config import configure_logging
from core.exceptions import (
    DomainException,
    AuthenticationException,
    AuthorizationException,
    ValidationException,
    ResourceNotFoundException,
    DuplicateResourceException,
    EmailDeliveryException,
    RepositoryException,
)
from application.services.notifications import IEmailTransport
from application.services.reminder_scheduler import ReminderScheduler
from application.services.reminder_worker import ReminderWorker
from infrastructure.external.email_transport import build_email_transport
from infrastructure.persistence.repositories.reminder_store import reminder_store_scope
from presentation.api.v1.endpoints import (
    auth_router,
    companies_router,
    reminders_router,
    scheduler_router,
)
from presentation.api.v1.rate_limit import build_limiter

API_VERSION = "1.0.0"


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, AuthenticationException):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationException):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ValidationException):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, ResourceNotFoundException):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, DuplicateResourceException):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, EmailDeliveryException):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, RepositoryException):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def create_app(
    config: Optional[Settings] = None,
    email_transport: Optional[IEmailTransport] = None,
    clock: Clock = utc_now,
) -> FastAPI:
    """
    Build the application

    Args:
        config: Settings to run with (process settings by default)
        email_transport: Transport override; built from EMAIL_BACKEND when omitted
        clock: Time source for the reminder scheduler
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        configure_logging(config)
        logger.info(f"Starting {config.APP_NAME} ({config.ENVIRONMENT})...")

        if config.scheduler_reachable:
            # Refuse to start with a scheduler that cannot deliver
            config.validate_for_scheduler()

        database = Database.from_settings(config)
        await database.init_models()
        logger.info("Database initialized")

        transport = email_transport or build_email_transport(config)
        scheduler = ReminderScheduler(
            reminder_store_scope(database),
            transport,
            clock=clock,
            batch_size=config.REMINDER_BATCH_SIZE,
            sender_name=config.SMTP_FROM_NAME,
        )

        app.state.settings = config
        app.state.database = database
        app.state.email_transport = transport
        app.state.reminder_scheduler = scheduler

        worker: Optional[ReminderWorker] = None
        worker_task: Optional[asyncio.Task] = None
        if config.REMINDER_WORKER_ENABLED:
            worker = ReminderWorker(scheduler, poll_interval=config.REMINDER_POLL_INTERVAL_SECONDS)
            worker_task = asyncio.create_task(worker.start())
        app.state.reminder_worker = worker

        try:
            yield
        finally:
            logger.info("Shutting down gracefully...")
            if worker is not None and worker_task is not None:
                await worker.stop()
                worker_task.cancel()
                with suppress(asyncio.CancelledError):
                    await worker_task
            await database.dispose()
            logger.info("Database connections closed")

    app = FastAPI(
        title=config.APP_NAME,
        description="Job application tracker with deadline email reminders",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if config.DEBUG else None,
        redoc_url="/redoc" if config.DEBUG else None,
    )
    app.state.settings = config

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting
    app.state.limiter = build_limiter(config)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        """Handle domain-level exceptions"""
        logger.warning(f"Domain exception: {str(exc)}")
        return JSONResponse(
            status_code=_status_for(exc),
            content={"detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler"""
        logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # Include API routes
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(companies_router, prefix="/api/v1", tags=["Companies"])
    app.include_router(reminders_router, prefix="/api/v1", tags=["Reminders"])
    app.include_router(scheduler_router, prefix="/api/v1", tags=["Scheduler"])

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        database: Optional[Database] = getattr(request.app.state, "database", None)
        database_ok = await database.health_check() if database else False
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": database_ok,
            "version": API_VERSION,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
