"""
Session participant CRUD operations.

Provides persistence for SessionParticipantModel with the registration
queries used by visibility checks, capacity checks and notifications.

Dependencies: sqlalchemy, training_backend.boundary.db.models
System role: Registration persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.boundary.db.CRUD.base_crud import BaseCRUD
from training_backend.boundary.db.models.participant_model import SessionParticipantModel
from training_backend.core.enums import NON_OCCUPYING_STATUSES, ParticipantStatus


class ParticipantCRUD(BaseCRUD[SessionParticipantModel]):
    """CRUD operations for SessionParticipantModel."""

    def __init__(self) -> None:
        """Initialize ParticipantCRUD with SessionParticipantModel."""
        super().__init__(SessionParticipantModel)

    async def get_for_user(
        self,
        session: AsyncSession,
        session_id: UUID,
        user_id: UUID,
    ) -> SessionParticipantModel | None:
        """
        Retrieve the (single) participant row for a user on a session.

        Args:
            session: Async database session
            session_id: Session UUID
            user_id: User UUID

        Returns:
            Participant row in any status, None if the user never registered
        """
        stmt = select(SessionParticipantModel).where(
            SessionParticipantModel.session_id == session_id,
            SessionParticipantModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def has_active_registration(
        self,
        session: AsyncSession,
        session_id: UUID,
        user_id: UUID,
    ) -> bool:
        """Return True if the user holds a non-cancelled row on the session."""
        stmt = select(SessionParticipantModel.id).where(
            SessionParticipantModel.session_id == session_id,
            SessionParticipantModel.user_id == user_id,
            SessionParticipantModel.status != ParticipantStatus.CANCELLED,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count_occupying(self, session: AsyncSession, session_id: UUID) -> int:
        """
        Count participants holding a seat.

        CANCELLED and NO_SHOW rows do not count against capacity.

        Args:
            session: Async database session
            session_id: Session UUID

        Returns:
            Number of seat-holding participants
        """
        stmt = select(func.count()).select_from(SessionParticipantModel).where(
            SessionParticipantModel.session_id == session_id,
            SessionParticipantModel.status.not_in(list(NON_OCCUPYING_STATUSES)),
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        active_only: bool = False,
    ) -> Sequence[SessionParticipantModel]:
        """
        List participants of a session in registration order.

        Args:
            session: Async database session
            session_id: Session UUID
            active_only: Exclude CANCELLED rows

        Returns:
            Sequence of participant rows
        """
        stmt = select(SessionParticipantModel).where(
            SessionParticipantModel.session_id == session_id,
        )
        if active_only:
            stmt = stmt.where(SessionParticipantModel.status != ParticipantStatus.CANCELLED)
        stmt = stmt.order_by(SessionParticipantModel.created_at.asc())
        result = await session.execute(stmt)
        return result.scalars().all()


participant_crud = ParticipantCRUD()
