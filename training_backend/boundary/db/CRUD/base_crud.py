"""
Generic CRUD for scheduling models.

Create, primary-key read and in-place update shared by the model-specific
CRUD classes. Rows are retired by stamping them (``deleted_at`` on
sessions, CANCELLED on registrations), so there is no delete here.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Model-bound CRUD operations.

    Methods flush but never commit: the calling service owns the
    transaction and commits once its whole operation succeeded.

    Type Parameters:
        ModelT: ORM model handled by this CRUD object
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **fields: Any) -> ModelT:
        """
        Insert a row and load its generated columns.

        Args:
            session: Async database session
            **fields: Column values

        Returns:
            The persisted instance with id and timestamps populated
        """
        instance = self.model(**fields)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """Row with this primary key, logically deleted or not."""
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(self, session: AsyncSession, instance: ModelT, **changes: Any) -> ModelT:
        """
        Apply ``changes`` to a loaded instance and flush.

        The instance is refreshed afterwards so ``onupdate`` columns
        (``updated_at``) reflect the write.

        Args:
            session: Async database session
            instance: Persistent instance
            **changes: Column values to set

        Returns:
            The refreshed instance
        """
        for field, value in changes.items():
            setattr(instance, field, value)
        await session.flush()
        await session.refresh(instance)
        return instance
