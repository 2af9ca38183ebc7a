"""
Test suite for joins racing on a capacity-limited session.

Each joiner runs in its own database session against a shared file-backed
SQLite database, as concurrent requests would.

System role: Verification that capacity holds under simultaneous joins
"""

import asyncio
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from training_backend.application.services.session_service import SessionService
from training_backend.boundary.db.create_tables import create_all_tables
from training_backend.boundary.db.CRUD.participant_crud import participant_crud
from training_backend.boundary.db.lookups import SqlParticipantLookup
from training_backend.core.exceptions import SessionFullError
from training_backend.core.locks import SessionLockRegistry
from training_backend.core.visibility import VisibilityEvaluator


@pytest.fixture
async def session_factory(tmp_path):
    """Session factory over a file-backed SQLite database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'joins.db'}")
    await create_all_tables(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)

    await engine.dispose()


class TestConcurrentJoins:
    """Test suite for SessionService.join_session() under contention."""

    @pytest.mark.asyncio
    async def test_capacity_holds_when_joins_race(
        self,
        session_factory,
        memberships,
        clients,
        dispatcher,
        scheduling_settings,
        clock,
        instructor_id,
        build_request,
    ) -> None:
        """Test five simultaneous joins of a one-seat session admit exactly one."""
        # Arrange
        locks = SessionLockRegistry()

        def make_service(db: AsyncSession) -> SessionService:
            return SessionService(
                db=db,
                visibility=VisibilityEvaluator(memberships, clients, SqlParticipantLookup(db)),
                memberships=memberships,
                clients=clients,
                notifier=dispatcher,
                settings=scheduling_settings,
                clock=clock,
                locks=locks,
            )

        async with session_factory() as db:
            created = await make_service(db).create_session(
                instructor_id, build_request(max_participants=1)
            )

        async def join(user_id: uuid.UUID) -> str:
            async with session_factory() as db:
                try:
                    await make_service(db).join_session(created.id, user_id)
                except SessionFullError:
                    return "full"
                return "ok"

        # Act
        results = await asyncio.gather(*(join(uuid.uuid4()) for _ in range(5)))
        await dispatcher.drain()

        # Assert
        assert sorted(results) == ["full", "full", "full", "full", "ok"]
        async with session_factory() as db:
            assert await participant_crud.count_occupying(db, created.id) == 1
