"""
Instructor-client relationship ORM model (read model).

Owned by the clients subsystem; read here for CLIENTS visibility.

Dependencies: sqlalchemy, training_backend.boundary.db.base
System role: Client relationship lookup source
"""

from uuid import UUID

from sqlalchemy import Enum, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from training_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from training_backend.core.enums import ClientRelationshipStatus


class InstructorClientModel(Base, UUIDMixin, TimestampMixin):
    """
    Instructor-client ORM model.

    Attributes:
        instructor_id: Instructor side of the relationship
        client_id: Client side of the relationship
        status: PENDING (invited), ACTIVE (confirmed) or ARCHIVED (ended)
    """

    __tablename__ = "instructor_clients"
    __table_args__ = (
        UniqueConstraint("instructor_id", "client_id", name="uq_instructor_client"),
    )

    instructor_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    client_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    status: Mapped[ClientRelationshipStatus] = mapped_column(
        Enum(ClientRelationshipStatus, native_enum=False),
        nullable=False,
        default=ClientRelationshipStatus.PENDING,
    )
