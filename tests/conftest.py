"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory database session, fake relationship lookups, recording
notification senders, a controllable clock and wired services.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from training_backend.application.notifications import NotificationDispatcher
from training_backend.application.services.instance_service import InstanceService
from training_backend.application.services.session_service import SessionService
from training_backend.configs.scheduling import SchedulingSettings
from training_backend.core.enums import SessionType, SessionVisibility
from training_backend.core.locks import SessionLockRegistry
from training_backend.core.visibility import VisibilityEvaluator
from training_backend.models.session import CreateSessionRequest

NOW = datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeMemberships:
    """GroupMembershipLookup backed by a set of (group_id, user_id) pairs."""

    def __init__(self) -> None:
        self.members: set[tuple[uuid.UUID, uuid.UUID]] = set()

    def add(self, group_id: uuid.UUID, user_id: uuid.UUID) -> None:
        self.members.add((group_id, user_id))

    async def is_active_member(self, group_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (group_id, user_id) in self.members

    async def list_user_group_ids(self, user_id: uuid.UUID) -> set[uuid.UUID]:
        return {g for g, u in self.members if u == user_id}


class FakeClients:
    """ClientRelationshipLookup backed by ACTIVE (instructor_id, client_id) pairs."""

    def __init__(self) -> None:
        self.active: set[tuple[uuid.UUID, uuid.UUID]] = set()

    def add(self, instructor_id: uuid.UUID, client_id: uuid.UUID) -> None:
        self.active.add((instructor_id, client_id))

    async def is_active_client(self, instructor_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (instructor_id, user_id) in self.active

    async def list_active_client_instructor_ids(self, user_id: uuid.UUID) -> set[uuid.UUID]:
        return {i for i, c in self.active if c == user_id}


class FakeParticipants:
    """ParticipantLookup backed by (session_id, user_id) pairs."""

    def __init__(self) -> None:
        self.active: set[tuple[uuid.UUID, uuid.UUID]] = set()

    async def has_active_registration(self, session_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (session_id, user_id) in self.active


class RecordingSender:
    """NotificationSender that records every delivery."""

    def __init__(self) -> None:
        self.sent: list[tuple[uuid.UUID, str, dict[str, Any]]] = []

    async def send(self, user_id: uuid.UUID, kind: str, context: dict[str, Any]) -> None:
        self.sent.append((user_id, kind, context))

    def kinds_for(self, user_id: uuid.UUID) -> list[str]:
        return [kind for recipient, kind, _ in self.sent if recipient == user_id]


class FailingSender:
    """NotificationSender whose deliveries always fail."""

    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, user_id: uuid.UUID, kind: str, context: dict[str, Any]) -> None:
        self.attempts += 1
        raise RuntimeError("mailer unavailable")


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with all tables created
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from training_backend.boundary.db.create_tables import create_all_tables, drop_all_tables

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all_tables(engine)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    await drop_all_tables(engine)
    await engine.dispose()


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at NOW; tests may move it."""
    return FrozenClock(NOW)


@pytest.fixture
def scheduling_settings() -> SchedulingSettings:
    """Scheduling policy with documented defaults, ignoring any .env file."""
    return SchedulingSettings(_env_file=None)


@pytest.fixture
def memberships() -> FakeMemberships:
    return FakeMemberships()


@pytest.fixture
def clients() -> FakeClients:
    return FakeClients()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def dispatcher(sender: RecordingSender) -> NotificationDispatcher:
    return NotificationDispatcher(sender)


@pytest.fixture
def session_service(
    test_async_db,
    memberships: FakeMemberships,
    clients: FakeClients,
    dispatcher: NotificationDispatcher,
    scheduling_settings: SchedulingSettings,
    clock: FrozenClock,
) -> SessionService:
    """SessionService over the test database with fake relationship lookups."""
    from training_backend.boundary.db.lookups import SqlParticipantLookup

    visibility = VisibilityEvaluator(memberships, clients, SqlParticipantLookup(test_async_db))
    return SessionService(
        db=test_async_db,
        visibility=visibility,
        memberships=memberships,
        clients=clients,
        notifier=dispatcher,
        settings=scheduling_settings,
        clock=clock,
        locks=SessionLockRegistry(),
    )


@pytest.fixture
def instance_service(test_async_db, scheduling_settings: SchedulingSettings) -> InstanceService:
    return InstanceService(db=test_async_db, settings=scheduling_settings)


@pytest.fixture
def instructor_id() -> uuid.UUID:
    return uuid.uuid4()


def make_create_request(**overrides: Any) -> CreateSessionRequest:
    """Build a valid CreateSessionRequest, ten days after NOW unless overridden."""
    fields: dict[str, Any] = {
        "title": "Morning Mobility",
        "description": "Full body mobility flow",
        "session_type": SessionType.GROUP,
        "visibility": SessionVisibility.PUBLIC,
        "scheduled_at": NOW + timedelta(days=10),
        "duration_minutes": 60,
        "location": "Studio A",
    }
    fields.update(overrides)
    return CreateSessionRequest(**fields)


@pytest.fixture
def build_request():
    """Factory for valid CreateSessionRequest objects."""
    return make_create_request


@pytest.fixture
def participants() -> FakeParticipants:
    return FakeParticipants()


@pytest.fixture
def failing_sender() -> FailingSender:
    return FailingSender()
