"""
Group membership ORM model (read model).

The groups subsystem owns this table; the scheduler only reads it to
evaluate GROUP visibility and to list a user's groups.

Dependencies: sqlalchemy, training_backend.boundary.db.base
System role: Membership lookup source
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from training_backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class GroupMemberModel(Base, UUIDMixin, TimestampMixin):
    """
    Group member ORM model.

    Attributes:
        group_id: Group the user belongs to
        user_id: Member user
        left_at: Set when the member left; only rows with left_at NULL are active
    """

    __tablename__ = "group_members"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_member"),)

    group_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    left_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True, default=None)
