"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin, SoftDeleteMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), dispose_engine(): Async connection management
  - SessionModel, SessionParticipantModel: Scheduling entities
  - session_crud, participant_crud: CRUD operation singletons
  - Sql*Lookup: Request-scoped adapters for the core lookup interfaces

Dependencies: sqlalchemy, training_backend.configs
System role: Database adapter providing persistent storage for sessions
and registrations with logical deletion.
"""

from training_backend.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin
from training_backend.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from training_backend.boundary.db.CRUD import participant_crud, session_crud
from training_backend.boundary.db.lookups import (
    SqlClientRelationshipLookup,
    SqlGroupMembershipLookup,
    SqlParticipantLookup,
)
from training_backend.boundary.db.models import SessionModel, SessionParticipantModel

__all__ = [
    "Base",
    "SessionModel",
    "SessionParticipantModel",
    "SoftDeleteMixin",
    "SqlClientRelationshipLookup",
    "SqlGroupMembershipLookup",
    "SqlParticipantLookup",
    "TimestampMixin",
    "UUIDMixin",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "participant_crud",
    "session_crud",
]
