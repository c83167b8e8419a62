"""
Database connection management.

One async engine per process. The API gets a session per request through
get_async_db; the import worker opens a session per consumed message from
the same factory.

Dependencies: sqlalchemy, csv_processor.configs
System role: Database connection lifecycle management
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from csv_processor.configs import get_settings
from csv_processor.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def build_engine(db_settings: DatabaseSettings) -> AsyncEngine:
    """
    Create an async engine for the configured database.

    Pool sizing applies to PostgreSQL only; SQLite URLs keep SQLAlchemy's
    defaults.

    Args:
        db_settings: Database settings

    Returns:
        AsyncEngine: Engine with pre-ping enabled for server databases
    """
    url = db_settings.async_database_url
    if db_settings.is_sqlite:
        return create_async_engine(url, echo=db_settings.echo_sql)
    return create_async_engine(
        url,
        echo=db_settings.echo_sql,
        pool_size=db_settings.pool_size,
        max_overflow=db_settings.max_overflow,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_engine() -> AsyncEngine:
    """Process-wide engine built from settings on first use."""
    return build_engine(get_settings().database)


@lru_cache
def get_async_session_factory() -> async_sessionmaker:
    """
    Session factory bound to the process-wide engine.

    Sessions do not expire objects on commit, so jobs stay readable after
    the producer's and the worker's commits.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit explicitly; anything left uncommitted is rolled back
    when the session closes.
    """
    async with get_async_session_factory()() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections if the engine was ever created."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
        logger.info("Database engine disposed")
