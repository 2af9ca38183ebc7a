"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from training_backend.boundary.db.CRUD import session_crud, participant_crud

    session = await session_crud.get_live(db, session_id)
"""

from training_backend.boundary.db.CRUD.base_crud import BaseCRUD
from training_backend.boundary.db.CRUD.participant_crud import ParticipantCRUD, participant_crud
from training_backend.boundary.db.CRUD.relationship_crud import (
    GroupMemberCRUD,
    InstructorClientCRUD,
    group_member_crud,
    instructor_client_crud,
)
from training_backend.boundary.db.CRUD.session_crud import SessionCRUD, session_crud

__all__ = [
    "BaseCRUD",
    "GroupMemberCRUD",
    "InstructorClientCRUD",
    "ParticipantCRUD",
    "SessionCRUD",
    "group_member_crud",
    "instructor_client_crud",
    "participant_crud",
    "session_crud",
]
