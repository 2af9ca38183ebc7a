"""
Database engine and request sessions.

One pooled async engine per process, a session factory bound to it and the
FastAPI dependency that hands each request its own session.

Dependencies: sqlalchemy, asyncpg, training_backend.configs
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

from training_backend.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Process-wide async engine.

    Pool sizing and SQL echo come from DatabaseSettings. ``pool_pre_ping``
    drops connections the server closed while they sat in the pool.

    Returns:
        AsyncEngine: Engine for the configured Postgres database
    """
    db_config = get_settings().database
    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the process engine.

    ``expire_on_commit=False`` keeps committed rows readable, which the
    services rely on when they build responses and notifications after
    committing.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Services commit their own writes. Whatever is left uncommitted when
    the request ends is rolled back as the session closes.
    """
    session_factory = get_async_session_factory()
    async with session_factory() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections if the engine was ever created."""
    if get_async_engine.cache_info().currsize == 0:
        return
    await get_async_engine().dispose()
    logger.info("Database engine disposed")
