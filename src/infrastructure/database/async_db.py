from __future__ import annotations

"""
Asynchronous Database Utilities Module

This module provides asynchronous database utilities using SQLAlchemy's
asyncio support for the SQL confirmation store.

**Security Note**: Ensure that the database connection URL (DATABASE_URL) is
configured for SSL/TLS when connecting over untrusted networks. asyncpg takes
SSL options in the URL rather than in connect_args. Avoid logging connection
details.

Key Components:
    - create_engine_from_settings: Builds the async engine from settings.
    - create_session_factory: A factory for asynchronous database sessions.
    - get_async_db: A context manager yielding an async session.
    - create_async_db_and_tables: Creates tables using the async engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from src.core.config.settings import settings

# Register the table on SQLModel.metadata.
from src.infrastructure.database.models import UserEmailStateRecord  # noqa: F401

logger = structlog.get_logger(__name__)


def create_engine_from_settings(url: Optional[str] = None, **kwargs) -> AsyncEngine:
    """
    Build the asynchronous engine.

    Args:
        url: Database URL; defaults to ``settings.DATABASE_URL``.
        **kwargs: Extra engine options, overriding the pool settings.

    Returns:
        AsyncEngine: Engine for the confirmation store.
    """
    url = url or settings.DATABASE_URL
    options = {"echo": settings.DATABASE_ECHO, "pool_pre_ping": True}
    if url.startswith("postgresql"):
        options.update(
            pool_size=settings.POSTGRES_POOL_SIZE,
            max_overflow=settings.POSTGRES_MAX_OVERFLOW,
        )
    options.update(kwargs)
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_async_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession, rolling back on error and always closing it.

    Yields:
        AsyncSession: An asynchronous database session.
    """
    async with session_factory() as session:
        logger.debug("Async database session created")
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise
        finally:
            await session.close()
            logger.debug("Async database session closed")


async def create_async_db_and_tables(engine: AsyncEngine) -> None:
    """
    Create tables using the async engine (mainly for test suites).
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Async database tables created", tables=list(SQLModel.metadata.tables.keys()))
