"""
Session CRUD operations.

Provides persistence for SessionModel with the scheduling-specific
queries: live-row reads, row locking, the "my sessions" union, public
discovery and materialized-instance lookups. Every read filters out
logically deleted rows.

Dependencies: sqlalchemy, training_backend.boundary.db.models
System role: Session persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from training_backend.boundary.db.CRUD.base_crud import BaseCRUD
from training_backend.boundary.db.models.participant_model import SessionParticipantModel
from training_backend.boundary.db.models.session_model import SessionModel
from training_backend.core.enums import (
    TERMINAL_SESSION_STATUSES,
    ParticipantStatus,
    SessionVisibility,
)


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with soft-delete aware queries.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    @staticmethod
    def _live() -> ColumnElement[bool]:
        return SessionModel.deleted_at.is_(None)

    async def get_live(self, session: AsyncSession, id: UUID) -> SessionModel | None:
        """
        Retrieve a session that has not been logically deleted.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            SessionModel if found and live, None otherwise
        """
        stmt = select(SessionModel).where(SessionModel.id == id, self._live())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_live_for_update(self, session: AsyncSession, id: UUID) -> SessionModel | None:
        """
        Retrieve a live session and lock its row until the transaction ends.

        Serializes capacity-sensitive writes across processes on backends
        that support SELECT ... FOR UPDATE (ignored by SQLite).

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            Locked SessionModel if found and live, None otherwise
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.id == id, self._live())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def soft_delete(
        self,
        session: AsyncSession,
        instance: SessionModel,
        deleted_at: datetime,
    ) -> SessionModel:
        """
        Mark a session as deleted without removing the row.

        Args:
            session: Async database session
            instance: Session to retire
            deleted_at: Deletion timestamp

        Returns:
            The updated SessionModel
        """
        return await self.update(session, instance, deleted_at=deleted_at)

    async def list_visible_to(
        self,
        session: AsyncSession,
        user_id: UUID,
        group_ids: set[UUID],
        client_instructor_ids: set[UUID],
        limit: int,
        offset: int,
    ) -> tuple[Sequence[SessionModel], int]:
        """
        Page through every live session the user can see.

        The union covers: sessions the user instructs, GROUP/PUBLIC sessions
        in the user's groups, CLIENTS sessions of instructors the user is an
        active client of, sessions with an active registration by the user,
        and all PUBLIC sessions. A single WHERE over one table keeps each
        session exactly once.

        Args:
            session: Async database session
            user_id: Caller
            group_ids: Groups the caller actively belongs to
            client_instructor_ids: Instructors the caller is an ACTIVE client of
            limit: Page size
            offset: Rows to skip

        Returns:
            (page of sessions ordered by start time, total matching count)
        """
        registered = select(SessionParticipantModel.session_id).where(
            SessionParticipantModel.user_id == user_id,
            SessionParticipantModel.status != ParticipantStatus.CANCELLED,
        )
        clauses: list[ColumnElement[bool]] = [
            SessionModel.instructor_id == user_id,
            SessionModel.visibility == SessionVisibility.PUBLIC,
            SessionModel.id.in_(registered),
        ]
        if group_ids:
            clauses.append(
                SessionModel.group_id.in_(list(group_ids))
                & SessionModel.visibility.in_([SessionVisibility.GROUP, SessionVisibility.PUBLIC])
            )
        if client_instructor_ids:
            clauses.append(
                SessionModel.instructor_id.in_(list(client_instructor_ids))
                & (SessionModel.visibility == SessionVisibility.CLIENTS)
            )

        condition = self._live() & or_(*clauses)
        return await self._paginate(session, condition, limit, offset)

    async def discover_public(
        self,
        session: AsyncSession,
        now: datetime,
        search: str | None,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[SessionModel], int]:
        """
        Page through upcoming, non-terminal PUBLIC sessions.

        Args:
            session: Async database session
            now: Reference time; sessions starting earlier are excluded
            search: Optional case-insensitive substring for title/description/location
            limit: Page size
            offset: Rows to skip

        Returns:
            (page of sessions ordered by start time, total matching count)
        """
        condition = (
            self._live()
            & (SessionModel.visibility == SessionVisibility.PUBLIC)
            & (SessionModel.scheduled_at >= now)
            & SessionModel.status.not_in(list(TERMINAL_SESSION_STATUSES))
        )
        if search:
            # Literal substring: % and _ in the search text are not wildcards
            condition = condition & or_(
                SessionModel.title.icontains(search, autoescape=True),
                SessionModel.description.icontains(search, autoescape=True),
                SessionModel.location.icontains(search, autoescape=True),
            )
        return await self._paginate(session, condition, limit, offset)

    async def find_instance_times(
        self,
        session: AsyncSession,
        instructor_id: UUID,
        title: str,
        window_start: datetime,
        window_end: datetime,
    ) -> set[datetime]:
        """
        Start times already taken by (instructor, title) inside a window.

        Used as the de-duplication key when materializing recurring
        instances.

        Args:
            session: Async database session
            instructor_id: Template owner
            title: Template title
            window_start: Inclusive lower bound
            window_end: Inclusive upper bound

        Returns:
            Set of aware UTC start times
        """
        stmt = select(SessionModel.scheduled_at).where(
            self._live(),
            SessionModel.instructor_id == instructor_id,
            SessionModel.title == title,
            SessionModel.scheduled_at >= window_start,
            SessionModel.scheduled_at <= window_end,
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def _paginate(
        self,
        session: AsyncSession,
        condition: ColumnElement[bool],
        limit: int,
        offset: int,
    ) -> tuple[Sequence[SessionModel], int]:
        count_stmt = select(func.count()).select_from(SessionModel).where(condition)
        total = (await session.execute(count_stmt)).scalar_one()

        stmt = (
            select(SessionModel)
            .where(condition)
            .order_by(SessionModel.scheduled_at.asc(), SessionModel.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all(), total


session_crud = SessionCRUD()
