"""
Collaborator interfaces consumed by the scheduling core.

Group membership, instructor-client relationships and notification
delivery are owned by other subsystems; the core only talks to them
through these protocols. SQL-backed and queue-backed implementations
live in ``training_backend.boundary``.

Dependencies: typing
System role: Ports between scheduling logic and external collaborators
"""

from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from training_backend.core.enums import SessionVisibility


class VisibleSession(Protocol):
    """Attributes the visibility rules read from a session."""

    id: UUID
    instructor_id: UUID
    group_id: UUID | None
    visibility: SessionVisibility


@runtime_checkable
class GroupMembershipLookup(Protocol):
    """Read access to group membership (members who left are inactive)."""

    async def is_active_member(self, group_id: UUID, user_id: UUID) -> bool: ...

    async def list_user_group_ids(self, user_id: UUID) -> set[UUID]: ...


@runtime_checkable
class ClientRelationshipLookup(Protocol):
    """Read access to instructor-client relationships."""

    async def is_active_client(self, instructor_id: UUID, user_id: UUID) -> bool: ...

    async def list_active_client_instructor_ids(self, user_id: UUID) -> set[UUID]: ...


@runtime_checkable
class ParticipantLookup(Protocol):
    """Read access to session registrations."""

    async def has_active_registration(self, session_id: UUID, user_id: UUID) -> bool: ...


@runtime_checkable
class NotificationSender(Protocol):
    """Delivers one notification. May raise; callers treat delivery as best effort."""

    async def send(self, user_id: UUID, kind: str, context: dict[str, Any]) -> None: ...
