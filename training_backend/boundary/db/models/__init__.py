"""
Database models package.

Exports:
  - SessionModel: Training session ORM model
  - SessionParticipantModel: Registration ORM model
  - GroupMemberModel, InstructorClientModel: Read models of external subsystems

Dependencies: sqlalchemy, training_backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from training_backend.boundary.db.models.group_member_model import GroupMemberModel
from training_backend.boundary.db.models.instructor_client_model import InstructorClientModel
from training_backend.boundary.db.models.participant_model import SessionParticipantModel
from training_backend.boundary.db.models.session_model import SessionModel

__all__ = [
    "GroupMemberModel",
    "InstructorClientModel",
    "SessionModel",
    "SessionParticipantModel",
]
