"""
Training session ORM model.

A bookable unit of training owned by one instructor, optionally scoped
to a group. Recurring templates carry their rule as JSON; materialized
instances are plain, non-recurring rows.

Dependencies: sqlalchemy, training_backend.boundary.db.base
System role: Session persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, Boolean, Enum, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from training_backend.boundary.db.base import (
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)
from training_backend.core.enums import SessionStatus, SessionType, SessionVisibility


class SessionModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Session ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        instructor_id: Owning instructor; the only user allowed to mutate the row
        group_id: Optional group the session belongs to
        title: Session title (255 char limit)
        description: Optional free text
        session_type: ONE_ON_ONE / GROUP / ONLINE / WORKSHOP
        visibility: PUBLIC / GROUP / CLIENTS / PRIVATE
        scheduled_at: Start timestamp (UTC)
        duration_minutes: Length in minutes (5-480)
        location: Optional location text
        max_participants: Seat limit, None for unbounded
        price: Optional price
        currency: ISO currency code (default RON)
        status: DRAFT / SCHEDULED / IN_PROGRESS / COMPLETED / CANCELLED
        is_recurring: Whether this row is a recurring template
        recurring_rule: JSON rule, required when is_recurring is set
        reminder_sent: Flag for the external reminder job
        deleted_at: Logical deletion marker
    """

    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_visibility_scheduled", "visibility", "scheduled_at"),
        Index("ix_sessions_instructor_title_scheduled", "instructor_id", "title", "scheduled_at"),
    )

    instructor_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    group_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True, default=None, index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    session_type: Mapped[SessionType] = mapped_column(
        Enum(SessionType, native_enum=False), nullable=False
    )
    visibility: Mapped[SessionVisibility] = mapped_column(
        Enum(SessionVisibility, native_enum=False),
        nullable=False,
        default=SessionVisibility.GROUP,
    )

    scheduled_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    price: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True, default=None
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="RON")
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False),
        nullable=False,
        default=SessionStatus.SCHEDULED,
        index=True,
    )

    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_rule: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)
    reminder_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
