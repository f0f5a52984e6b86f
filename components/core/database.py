"""Core classes and mixins for DB connections"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, AsyncContextManager, Optional, cast

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from components.core import config

logger = logging.getLogger(__name__)

Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]


def utcnow() -> datetime:
    """Naive UTC timestamp used for column defaults."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DatabaseManager:
    """
    Owns the engine and hands out sessions.

    One instance is created per application and attached to it for the
    lifetime of the process: `connect()` runs at startup, `dispose()` at
    shutdown.
    """

    def __init__(
        self,
        engine: Optional[AsyncEngine] = None,
        settings: Optional[config.Settings] = None,
    ) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.settings = settings or config.get_settings()
        self.engine = engine or self._create_engine()
        self._session_factory = sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the configured database."""
        return create_async_engine(
            self.settings.async_db_url,
            echo=self.settings.DEBUG,
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=self.settings.DB_POOL_SIZE,
            max_overflow=10,
            pool_recycle=1800,
        )

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")

        return cast(SessionMaker, self._session_factory)

    @asynccontextmanager
    async def get_db(self) -> AsyncIterator[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    async def connect(self, create_tables: bool = False) -> None:
        """Verify connectivity and optionally create missing tables."""
        async with self.engine.begin() as conn:
            if create_tables:
                await conn.run_sync(Base.metadata.create_all)
            await conn.execute(text("SELECT 1"))
        logger.info("Database connected successfully")

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database connections closed")
