"""
Database configuration - SQLAlchemy 2.0 Async
Project: Iron Hub (customer ledger backend)

Defines engine and session factory for the postgres storage backend.
The engine is created lazily: with the in-memory backend no driver
connection is ever attempted.
"""

import logging
from functools import lru_cache

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ironhub.core.config import settings

# Logger for this module
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Engine Async SQLAlchemy 2.0
# ------------------------------------------------------------
@lru_cache()
def get_engine() -> AsyncEngine:
    """Create (once) the async engine for settings.database_url."""
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,  # Log SQL in debug mode
        pool_pre_ping=True,   # Check the connection before using it
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


# ------------------------------------------------------------
# Session Factory
# ------------------------------------------------------------
@lru_cache()
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine."""
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db() -> None:
    """
    Check that the database is reachable.

    No-op for the in-memory backend.
    """
    if settings.storage_backend != "postgres":
        logger.info("Storage backend '%s': no database to initialize", settings.storage_backend)
        return
    try:
        async with get_engine().begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established")
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        raise


async def close_db() -> None:
    """
    Dispose of the database connections on shutdown.
    """
    if settings.storage_backend != "postgres":
        return
    await get_engine().dispose()
    logger.info("Database connections closed")
