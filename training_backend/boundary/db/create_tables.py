"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.
Production schemas are owned by migrations; this is for development
databases and the test suite.

Dependencies: sqlalchemy, training_backend.configs
System role: Database schema initialization

Usage:
    python -m training_backend.boundary.db.create_tables
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine

from training_backend.boundary.db.base import Base
from training_backend.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from training_backend.boundary.db.models import (  # noqa: F401
    GroupMemberModel,
    InstructorClientModel,
    SessionModel,
    SessionParticipantModel,
)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Target engine (defaults to the configured application engine)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


if __name__ == "__main__":
    asyncio.run(create_all_tables())
    print("All tables created successfully.")
