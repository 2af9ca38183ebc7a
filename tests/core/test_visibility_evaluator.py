"""
Test suite for the visibility evaluator.

Uses in-memory fakes for group membership, client relationships and
registrations.

System role: Verification of session access rules
"""

import uuid
from types import SimpleNamespace

import pytest

from training_backend.core.enums import SessionVisibility
from training_backend.core.exceptions import AccessDeniedError
from training_backend.core.visibility import VisibilityEvaluator, VisibilityReason


@pytest.fixture
def evaluator(memberships, clients, participants) -> VisibilityEvaluator:
    return VisibilityEvaluator(memberships, clients, participants)


def make_session(
    visibility: SessionVisibility,
    instructor_id: uuid.UUID | None = None,
    group_id: uuid.UUID | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid.uuid4(),
        instructor_id=instructor_id or uuid.uuid4(),
        group_id=group_id,
        visibility=visibility,
    )


class TestCanView:
    """Test suite for VisibilityEvaluator.can_view()."""

    @pytest.mark.asyncio
    async def test_instructor_sees_private_session(self, evaluator) -> None:
        """Test the instructor always sees their own session."""
        session = make_session(SessionVisibility.PRIVATE)

        assert await evaluator.can_view(session, session.instructor_id)
        assert await evaluator.evaluate(session, session.instructor_id) == VisibilityReason.INSTRUCTOR

    @pytest.mark.asyncio
    async def test_public_session_visible_to_anyone(self, evaluator) -> None:
        """Test PUBLIC sessions are visible to strangers."""
        session = make_session(SessionVisibility.PUBLIC)

        assert await evaluator.can_view(session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_group_session_visible_to_active_member_only(self, evaluator, memberships) -> None:
        """Test GROUP sessions require active membership in the session's group."""
        # Arrange
        group_id = uuid.uuid4()
        member, outsider = uuid.uuid4(), uuid.uuid4()
        memberships.add(group_id, member)
        session = make_session(SessionVisibility.GROUP, group_id=group_id)

        # Act / Assert
        assert await evaluator.evaluate(session, member) == VisibilityReason.GROUP_MEMBER
        assert not await evaluator.can_view(session, outsider)

    @pytest.mark.asyncio
    async def test_group_visibility_without_group_denies(self, evaluator) -> None:
        """Test a GROUP session without a group falls through to denial."""
        session = make_session(SessionVisibility.GROUP, group_id=None)

        assert not await evaluator.can_view(session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_clients_session_requires_active_relationship(self, evaluator, clients) -> None:
        """Test CLIENTS sessions are visible to ACTIVE clients and not to others."""
        # Arrange
        instructor = uuid.uuid4()
        active_client, pending_client = uuid.uuid4(), uuid.uuid4()
        clients.add(instructor, active_client)
        session = make_session(SessionVisibility.CLIENTS, instructor_id=instructor)

        # Act / Assert
        assert await evaluator.evaluate(session, active_client) == VisibilityReason.ACTIVE_CLIENT
        assert not await evaluator.can_view(session, pending_client)

    @pytest.mark.asyncio
    async def test_private_session_hidden_from_group_member(self, evaluator, memberships) -> None:
        """Test PRIVATE sessions ignore group membership."""
        group_id = uuid.uuid4()
        member = uuid.uuid4()
        memberships.add(group_id, member)
        session = make_session(SessionVisibility.PRIVATE, group_id=group_id)

        assert not await evaluator.can_view(session, member)

    @pytest.mark.asyncio
    async def test_registered_participant_sees_private_session(self, evaluator, participants) -> None:
        """Test an active registration grants visibility."""
        user = uuid.uuid4()
        session = make_session(SessionVisibility.PRIVATE)
        participants.active.add((session.id, user))

        assert await evaluator.evaluate(session, user) == VisibilityReason.PARTICIPANT


class TestCanJoinAndAssert:
    """Test suite for can_join() and assert_can_view()."""

    @pytest.mark.asyncio
    async def test_instructor_cannot_join(self, evaluator) -> None:
        """Test can_join excludes the instructor."""
        session = make_session(SessionVisibility.PUBLIC)

        assert not await evaluator.can_join(session, session.instructor_id)
        assert await evaluator.can_join(session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_assert_can_view_raises_access_denied(self, evaluator) -> None:
        """Test denial raises AccessDeniedError with context."""
        session = make_session(SessionVisibility.PRIVATE)
        caller = uuid.uuid4()

        with pytest.raises(AccessDeniedError) as exc_info:
            await evaluator.assert_can_view(session, caller)

        assert exc_info.value.details["caller_id"] == str(caller)
