"""
Recurring instance materializer.

Turns a recurring template into concrete, non-recurring sessions for a
horizon of weeks. A candidate whose (instructor, title, start time)
already exists among live sessions is treated as generated, which makes
repeated calls with the same horizon idempotent. The template row is
never modified.

Dependencies: training_backend.boundary.db.CRUD, training_backend.core.recurrence
System role: Recurring session expansion
"""

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.application.services.session_service import copy_session_fields
from training_backend.boundary.db.CRUD.session_crud import session_crud
from training_backend.configs.scheduling import SchedulingSettings
from training_backend.core.enums import SessionStatus
from training_backend.core.exceptions import (
    AccessDeniedError,
    InvalidRecurrenceRuleError,
    SessionNotFoundError,
)
from training_backend.core.recurrence import compute_occurrences
from training_backend.models.recurrence import parse_recurring_rule
from training_backend.models.session import GenerateInstancesResponse, SessionResponse

logger = logging.getLogger(__name__)


class InstanceService:
    """Materializes occurrences of recurring templates."""

    def __init__(self, db: AsyncSession, settings: SchedulingSettings) -> None:
        """
        Initialize instance service.

        Args:
            db: Async SQLAlchemy session
            settings: Scheduling policy (default horizon)
        """
        self.db = db
        self.settings = settings

    async def generate_instances(
        self,
        template_id: UUID,
        instructor_id: UUID,
        horizon_weeks: int | None = None,
    ) -> GenerateInstancesResponse:
        """
        Create the missing instances of a recurring template.

        Args:
            template_id: Recurring template session
            instructor_id: Caller, must own the template
            horizon_weeks: Weeks ahead of the template start (default from settings)

        Returns:
            GenerateInstancesResponse: Count and rows created by this call

        Raises:
            SessionNotFoundError: If the template does not exist or was deleted
            AccessDeniedError: If the caller is not the instructor
            InvalidRecurrenceRuleError: If the template is not recurring or its rule is invalid
            ValidationError: If horizon_weeks is out of range
        """
        template = await session_crud.get_live(self.db, template_id)
        if template is None:
            raise SessionNotFoundError(template_id)
        if template.instructor_id != instructor_id:
            raise AccessDeniedError(
                "Only the instructor can generate instances of this session",
                {"session_id": str(template_id), "caller_id": str(instructor_id)},
            )
        if not template.is_recurring or template.recurring_rule is None:
            raise InvalidRecurrenceRuleError(
                "Session is not a recurring template",
                details={"session_id": str(template_id)},
            )

        weeks = horizon_weeks
        if weeks is None:
            weeks = self.settings.default_horizon_weeks
        rule = parse_recurring_rule(template.recurring_rule)
        candidates = compute_occurrences(template.scheduled_at, rule, weeks, include_first=False)
        if not candidates:
            return GenerateInstancesResponse(created_count=0, created_sessions=[])

        taken = await session_crud.find_instance_times(
            self.db,
            instructor_id=template.instructor_id,
            title=template.title,
            window_start=template.scheduled_at,
            window_end=template.scheduled_at + timedelta(weeks=weeks),
        )

        fields = copy_session_fields(template)
        created = []
        for scheduled_at in candidates:
            if scheduled_at in taken:
                continue
            instance = await session_crud.create(
                self.db,
                **fields,
                scheduled_at=scheduled_at,
                status=SessionStatus.SCHEDULED,
                is_recurring=False,
                recurring_rule=None,
            )
            created.append(instance)
        await self.db.commit()

        logger.info(
            "Recurring instances generated",
            extra={
                "template_id": str(template_id),
                "weeks": weeks,
                "candidates": len(candidates),
                "created": len(created),
            },
        )
        return GenerateInstancesResponse(
            created_count=len(created),
            created_sessions=[SessionResponse.model_validate(s) for s in created],
        )
