"""
Session visibility evaluator.

Decides whether a caller may see (and therefore act on) a session.
Rules are evaluated in order, first match wins:

1. the caller is the session's instructor
2. visibility is PUBLIC
3. visibility is GROUP, the session has a group, and the caller is an
   active member of it
4. visibility is CLIENTS and the caller is an ACTIVE client of the
   instructor
5. the caller holds a non-cancelled registration on the session

Nothing is cached: callers re-evaluate on every read and join.

Dependencies: training_backend.core.interfaces
System role: Access control for session reads and joins
"""

import enum
import logging
from uuid import UUID

from training_backend.core.enums import SessionVisibility
from training_backend.core.exceptions import AccessDeniedError
from training_backend.core.interfaces import (
    ClientRelationshipLookup,
    GroupMembershipLookup,
    ParticipantLookup,
    VisibleSession,
)

logger = logging.getLogger(__name__)


class VisibilityReason(str, enum.Enum):
    """Which rule granted (or denied) access."""

    INSTRUCTOR = "instructor"
    PUBLIC = "public"
    GROUP_MEMBER = "group_member"
    ACTIVE_CLIENT = "active_client"
    PARTICIPANT = "participant"
    DENIED = "denied"


class VisibilityEvaluator:
    """Evaluates the visibility rules against external relationship lookups."""

    def __init__(
        self,
        memberships: GroupMembershipLookup,
        clients: ClientRelationshipLookup,
        participants: ParticipantLookup,
    ) -> None:
        self.memberships = memberships
        self.clients = clients
        self.participants = participants

    async def evaluate(self, session: VisibleSession, caller_id: UUID) -> VisibilityReason:
        """
        Return the first rule that grants the caller access, or DENIED.

        Args:
            session: Session being accessed
            caller_id: Requesting user

        Returns:
            VisibilityReason: Matched rule
        """
        if session.instructor_id == caller_id:
            return VisibilityReason.INSTRUCTOR

        if session.visibility == SessionVisibility.PUBLIC:
            return VisibilityReason.PUBLIC

        if session.visibility == SessionVisibility.GROUP and session.group_id is not None:
            if await self.memberships.is_active_member(session.group_id, caller_id):
                return VisibilityReason.GROUP_MEMBER

        if session.visibility == SessionVisibility.CLIENTS:
            if await self.clients.is_active_client(session.instructor_id, caller_id):
                return VisibilityReason.ACTIVE_CLIENT

        if await self.participants.has_active_registration(session.id, caller_id):
            return VisibilityReason.PARTICIPANT

        return VisibilityReason.DENIED

    async def can_view(self, session: VisibleSession, caller_id: UUID) -> bool:
        """Return True if the caller may see the session."""
        reason = await self.evaluate(session, caller_id)
        logger.debug(
            "Visibility evaluated",
            extra={
                "session_id": str(session.id),
                "caller_id": str(caller_id),
                "visibility": session.visibility.value,
                "reason": reason.value,
            },
        )
        return reason is not VisibilityReason.DENIED

    async def can_join(self, session: VisibleSession, caller_id: UUID) -> bool:
        """Return True if the caller may see the session and is not its instructor."""
        if session.instructor_id == caller_id:
            return False
        return await self.can_view(session, caller_id)

    async def assert_can_view(self, session: VisibleSession, caller_id: UUID) -> None:
        """
        Guard for protected operations.

        Raises:
            AccessDeniedError: If no visibility rule grants access
        """
        if not await self.can_view(session, caller_id):
            raise AccessDeniedError(
                "You do not have access to this session",
                {"session_id": str(session.id), "caller_id": str(caller_id)},
            )
