"""
SQL-backed collaborator lookups.

Binds the relationship CRUD singletons to a request-scoped session so
the visibility evaluator and services can use them through the
interfaces in ``training_backend.core.interfaces``.

Dependencies: sqlalchemy, training_backend.boundary.db.CRUD
System role: Adapters from the core ports to the database
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.boundary.db.CRUD import (
    group_member_crud,
    instructor_client_crud,
    participant_crud,
)


class SqlGroupMembershipLookup:
    """GroupMembershipLookup over the group_members table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def is_active_member(self, group_id: UUID, user_id: UUID) -> bool:
        return await group_member_crud.is_active_member(self.db, group_id, user_id)

    async def list_user_group_ids(self, user_id: UUID) -> set[UUID]:
        return await group_member_crud.list_group_ids(self.db, user_id)


class SqlClientRelationshipLookup:
    """ClientRelationshipLookup over the instructor_clients table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def is_active_client(self, instructor_id: UUID, user_id: UUID) -> bool:
        return await instructor_client_crud.is_active_client(self.db, instructor_id, user_id)

    async def list_active_client_instructor_ids(self, user_id: UUID) -> set[UUID]:
        return await instructor_client_crud.list_active_instructor_ids(self.db, user_id)


class SqlParticipantLookup:
    """ParticipantLookup over the session_participants table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def has_active_registration(self, session_id: UUID, user_id: UUID) -> bool:
        return await participant_crud.has_active_registration(self.db, session_id, user_id)
