"""Database lifecycle and dependency injection."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

import fastapi
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.customer.models
import components.account.models
import components.transaction.models
import components.loan.models


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    db_manager: DatabaseManager = request.app.state.db_manager
    async with db_manager.get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI, db_manager: DatabaseManager) -> None:
    """Attach the database handle to the application."""
    app.state.db_manager = db_manager


@asynccontextmanager
async def database_lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
    """Open the database handle at startup and close it at shutdown."""
    db_manager: DatabaseManager = app.state.db_manager
    await db_manager.connect(create_tables=db_manager.settings.DB_AUTO_CREATE)
    try:
        yield
    finally:
        await db_manager.dispose()
