"""
Session participant ORM model.

Join record between a user and a session. One row per (session, user)
pair; the single mutable status field carries the registration history
and a cancelled row is reactivated on re-registration.

Dependencies: sqlalchemy, training_backend.boundary.db.base
System role: Registration persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from training_backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin
from training_backend.core.enums import ParticipantStatus


class SessionParticipantModel(Base, UUIDMixin, TimestampMixin):
    """
    Participant ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Session the user registered for
        user_id: Registered user
        status: REGISTERED / CONFIRMED / ATTENDED / NO_SHOW / CANCELLED
        checked_in_at: Check-in timestamp, set when the user attended

    Constraints:
        (session_id, user_id): UNIQUE; rows are never physically deleted
    """

    __tablename__ = "session_participants"
    __table_args__ = (
        UniqueConstraint("session_id", "user_id", name="uq_session_participant"),
    )

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    status: Mapped[ParticipantStatus] = mapped_column(
        Enum(ParticipantStatus, native_enum=False),
        nullable=False,
        default=ParticipantStatus.REGISTERED,
        index=True,
    )
    checked_in_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True, default=None
    )
