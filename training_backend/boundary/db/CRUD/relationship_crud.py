"""
Group membership and instructor-client queries.

Read-only access to tables owned by the groups and clients subsystems.

Dependencies: sqlalchemy, training_backend.boundary.db.models
System role: Relationship lookups backing visibility decisions
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.boundary.db.CRUD.base_crud import BaseCRUD
from training_backend.boundary.db.models.group_member_model import GroupMemberModel
from training_backend.boundary.db.models.instructor_client_model import InstructorClientModel
from training_backend.core.enums import ClientRelationshipStatus


class GroupMemberCRUD(BaseCRUD[GroupMemberModel]):
    """Queries over group membership (members who left are inactive)."""

    def __init__(self) -> None:
        super().__init__(GroupMemberModel)

    async def is_active_member(self, session: AsyncSession, group_id: UUID, user_id: UUID) -> bool:
        stmt = select(GroupMemberModel.id).where(
            GroupMemberModel.group_id == group_id,
            GroupMemberModel.user_id == user_id,
            GroupMemberModel.left_at.is_(None),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_group_ids(self, session: AsyncSession, user_id: UUID) -> set[UUID]:
        stmt = select(GroupMemberModel.group_id).where(
            GroupMemberModel.user_id == user_id,
            GroupMemberModel.left_at.is_(None),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())


class InstructorClientCRUD(BaseCRUD[InstructorClientModel]):
    """Queries over instructor-client relationships."""

    def __init__(self) -> None:
        super().__init__(InstructorClientModel)

    async def is_active_client(
        self, session: AsyncSession, instructor_id: UUID, client_id: UUID
    ) -> bool:
        stmt = select(InstructorClientModel.id).where(
            InstructorClientModel.instructor_id == instructor_id,
            InstructorClientModel.client_id == client_id,
            InstructorClientModel.status == ClientRelationshipStatus.ACTIVE,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_active_instructor_ids(self, session: AsyncSession, client_id: UUID) -> set[UUID]:
        stmt = select(InstructorClientModel.instructor_id).where(
            InstructorClientModel.client_id == client_id,
            InstructorClientModel.status == ClientRelationshipStatus.ACTIVE,
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())


group_member_crud = GroupMemberCRUD()
instructor_client_crud = InstructorClientCRUD()
