"""
Test suite for InstanceService.

System role: Verification of recurring instance materialization
"""

import uuid
from datetime import datetime, timezone

import pytest

from training_backend.boundary.db.CRUD.session_crud import session_crud
from training_backend.core.enums import SessionStatus
from training_backend.core.exceptions import (
    AccessDeniedError,
    InvalidRecurrenceRuleError,
    SessionNotFoundError,
    ValidationError,
)

TEMPLATE_START = datetime(2026, 2, 16, 9, 0, tzinfo=timezone.utc)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
async def template(session_service, instructor_id, build_request):
    """Weekly Monday/Wednesday/Friday template starting Monday 2026-02-16 09:00 UTC."""
    return await session_service.create_session(
        instructor_id,
        build_request(
            title="Strength Circuit",
            scheduled_at=TEMPLATE_START,
            max_participants=12,
            price=30.0,
            is_recurring=True,
            recurring_rule={"frequency": "WEEKLY", "days_of_week": [1, 3, 5]},
        ),
    )


class TestGenerateInstances:
    """Test suite for InstanceService.generate_instances()."""

    @pytest.mark.asyncio
    async def test_creates_occurrences_after_template(
        self, instance_service, template, instructor_id
    ) -> None:
        """Test two weeks of Mon/Wed/Fri yield five instances, template excluded."""
        # Act
        result = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=2)

        # Assert
        assert result.created_count == 5
        assert [s.scheduled_at for s in result.created_sessions] == [
            utc(2026, 2, 18, 9, 0),
            utc(2026, 2, 20, 9, 0),
            utc(2026, 2, 23, 9, 0),
            utc(2026, 2, 25, 9, 0),
            utc(2026, 2, 27, 9, 0),
        ]

    @pytest.mark.asyncio
    async def test_instances_copy_template_fields(
        self, instance_service, template, instructor_id
    ) -> None:
        """Test instances are plain SCHEDULED copies of the template."""
        result = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=1)

        for instance in result.created_sessions:
            assert instance.title == "Strength Circuit"
            assert instance.instructor_id == instructor_id
            assert instance.max_participants == 12
            assert instance.price == 30.0
            assert instance.status == SessionStatus.SCHEDULED
            assert instance.is_recurring is False
            assert instance.recurring_rule is None

    @pytest.mark.asyncio
    async def test_second_call_is_idempotent(self, instance_service, template, instructor_id) -> None:
        """Test repeating the same horizon creates nothing new."""
        await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=2)

        result = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=2)

        assert result.created_count == 0
        assert result.created_sessions == []

    @pytest.mark.asyncio
    async def test_longer_horizon_only_adds_missing_weeks(
        self, instance_service, template, instructor_id
    ) -> None:
        await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=1)

        result = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=2)

        assert [s.scheduled_at for s in result.created_sessions] == [
            utc(2026, 2, 23, 9, 0),
            utc(2026, 2, 25, 9, 0),
            utc(2026, 2, 27, 9, 0),
        ]

    @pytest.mark.asyncio
    async def test_existing_session_with_same_title_and_time_is_skipped(
        self, instance_service, session_service, template, instructor_id, build_request
    ) -> None:
        """Test a manually created copy counts as already generated."""
        # Arrange
        await session_service.create_session(
            instructor_id,
            build_request(title="Strength Circuit", scheduled_at=utc(2026, 2, 18, 9, 0)),
        )
        await session_service.create_session(
            instructor_id,
            build_request(title="Different Class", scheduled_at=utc(2026, 2, 20, 9, 0)),
        )

        # Act
        result = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=1)

        # Assert
        assert [s.scheduled_at for s in result.created_sessions] == [utc(2026, 2, 20, 9, 0)]

    @pytest.mark.asyncio
    async def test_deleted_instance_is_regenerated(
        self, instance_service, session_service, template, instructor_id
    ) -> None:
        first = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=1)
        await session_service.delete_session(first.created_sessions[0].id, instructor_id)

        result = await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=1)

        assert [s.scheduled_at for s in result.created_sessions] == [utc(2026, 2, 18, 9, 0)]

    @pytest.mark.asyncio
    async def test_template_is_unchanged(
        self, instance_service, template, instructor_id, test_async_db
    ) -> None:
        rule_before = dict(template.recurring_rule)

        await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=2)

        stored = await session_crud.get_live(test_async_db, template.id)
        assert stored.is_recurring is True
        assert stored.recurring_rule == rule_before
        assert stored.scheduled_at == TEMPLATE_START

    @pytest.mark.asyncio
    async def test_default_horizon_is_used(
        self, instance_service, template, instructor_id, scheduling_settings
    ) -> None:
        """Test omitting the horizon generates the configured number of weeks."""
        result = await instance_service.generate_instances(template.id, instructor_id)

        assert result.created_count == 3 * scheduling_settings.default_horizon_weeks - 1

    @pytest.mark.asyncio
    async def test_non_instructor_is_denied(self, instance_service, template) -> None:
        with pytest.raises(AccessDeniedError):
            await instance_service.generate_instances(template.id, uuid.uuid4(), horizon_weeks=1)

    @pytest.mark.asyncio
    async def test_non_recurring_template_is_rejected(
        self, instance_service, session_service, instructor_id, build_request
    ) -> None:
        session = await session_service.create_session(instructor_id, build_request())

        with pytest.raises(InvalidRecurrenceRuleError):
            await instance_service.generate_instances(session.id, instructor_id)

    @pytest.mark.asyncio
    async def test_unknown_template_raises_not_found(self, instance_service, instructor_id) -> None:
        with pytest.raises(SessionNotFoundError):
            await instance_service.generate_instances(uuid.uuid4(), instructor_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("weeks", [0, 53])
    async def test_horizon_out_of_range_is_rejected(
        self, instance_service, template, instructor_id, weeks
    ) -> None:
        with pytest.raises(ValidationError):
            await instance_service.generate_instances(template.id, instructor_id, horizon_weeks=weeks)
