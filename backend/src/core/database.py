"""
Async Database Configuration
SQLAlchemy 2.0 with async support
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, StaticPool

from .config import Settings


# Base class for ORM models
Base = declarative_base()


class Database:
    """
    Lifetime-scoped database handle

    Built once at startup and handed to the API layer (via ``app.state``)
    and to the reminder scheduler; disposed on shutdown.
    """

    def __init__(self, url: str, echo: bool = False, **engine_args):
        if not url:
            raise ValueError("Database URL is required")

        engine_args.setdefault("echo", echo)
        if make_url(url).get_backend_name() == "sqlite":
            # In-memory SQLite must share one connection across sessions
            engine_args.setdefault("poolclass", StaticPool)
            engine_args.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_args.setdefault("pool_pre_ping", True)

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_args)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "Database":
        """Build a handle with pool settings from configuration"""
        engine_args = {}
        if make_url(config.DATABASE_URL).get_backend_name() != "sqlite":
            if config.DEBUG:
                engine_args["poolclass"] = NullPool
            else:
                engine_args.update({
                    "pool_size": config.DB_POOL_SIZE,
                    "max_overflow": config.DB_MAX_OVERFLOW,
                    "pool_timeout": config.DB_POOL_TIMEOUT,
                    "pool_recycle": config.DB_POOL_RECYCLE,
                })
        return cls(config.DATABASE_URL, echo=config.DEBUG, **engine_args)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for database sessions

        Usage:
            async with database.session() as session:
                result = await session.execute(query)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_models(self) -> None:
        """Initialize database (create tables)"""
        # Register ORM models on Base.metadata
        import infrastructure.persistence.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        """Close database connections"""
        await self.engine.dispose()

    async def health_check(self) -> bool:
        """Database health check"""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the handle built at startup"""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialised; application lifespan has not run")
    return database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions

    Usage:
        @router.get("/users")
        async def get_users(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
