"""
Domain enumerations for sessions and participants.

Shared by the ORM models, API schemas and the pure domain logic.

Dependencies: None (pure domain layer)
System role: Closed value sets for scheduling state
"""

import enum


class SessionType(str, enum.Enum):
    """Kind of training a session offers."""

    ONE_ON_ONE = "ONE_ON_ONE"
    GROUP = "GROUP"
    ONLINE = "ONLINE"
    WORKSHOP = "WORKSHOP"


class SessionVisibility(str, enum.Enum):
    """
    Who may see and join a session.

    PUBLIC: anyone
    GROUP: active members of the session's group
    CLIENTS: users with an ACTIVE client relationship with the instructor
    PRIVATE: only the instructor and registered participants
    """

    PUBLIC = "PUBLIC"
    GROUP = "GROUP"
    CLIENTS = "CLIENTS"
    PRIVATE = "PRIVATE"


class SessionStatus(str, enum.Enum):
    """Session lifecycle states."""

    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


TERMINAL_SESSION_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED})


class ParticipantStatus(str, enum.Enum):
    """Registration states of a user on a session."""

    REGISTERED = "REGISTERED"
    CONFIRMED = "CONFIRMED"
    ATTENDED = "ATTENDED"
    NO_SHOW = "NO_SHOW"
    CANCELLED = "CANCELLED"


# Rows in these states do not occupy a seat.
NON_OCCUPYING_STATUSES = frozenset({ParticipantStatus.CANCELLED, ParticipantStatus.NO_SHOW})


class ClientRelationshipStatus(str, enum.Enum):
    """Instructor-client relationship states (owned by the clients subsystem)."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
