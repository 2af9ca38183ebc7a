"""
Session lifecycle service.

Coordinates session CRUD, registration, attendance and the paginated
read views. Every operation captures one "now" from the injected clock,
commits its primary write and only then dispatches notifications, which
are best effort and never affect the result.

Dependencies: training_backend.boundary.db.CRUD, training_backend.core,
training_backend.application.notifications
System role: Session use case orchestration
"""

import logging
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.application.notifications import (
    Notification,
    NotificationDispatcher,
    NotificationKind,
)
from training_backend.boundary.db.CRUD.participant_crud import participant_crud
from training_backend.boundary.db.CRUD.session_crud import session_crud
from training_backend.boundary.db.models.participant_model import SessionParticipantModel
from training_backend.boundary.db.models.session_model import SessionModel
from training_backend.configs.scheduling import SchedulingSettings
from training_backend.core.clock import Clock, utcnow
from training_backend.core.enums import ParticipantStatus, SessionStatus
from training_backend.core.exceptions import (
    AccessDeniedError,
    AlreadyRegisteredError,
    CancellationCutoffError,
    CheckInWindowError,
    InvalidRecurrenceRuleError,
    ParticipantNotFoundError,
    SelfJoinError,
    SessionFullError,
    SessionNotFoundError,
    ValidationError,
)
from training_backend.core.interfaces import ClientRelationshipLookup, GroupMembershipLookup
from training_backend.core.locks import SessionLockRegistry, session_locks
from training_backend.core.participant_state import can_transition
from training_backend.core.recurrence import compute_occurrences, to_iso
from training_backend.core.visibility import VisibilityEvaluator
from training_backend.models.common import PaginatedResponse
from training_backend.models.recurrence import dump_recurring_rule, parse_recurring_rule
from training_backend.models.session import (
    CreateSessionRequest,
    ParticipantResponse,
    RecurrencePreviewResponse,
    SessionDetailResponse,
    SessionResponse,
    UpdateSessionRequest,
)

logger = logging.getLogger(__name__)

# Fields a copy (clone or materialized instance) inherits from its source
COPIED_FIELDS = (
    "instructor_id",
    "group_id",
    "title",
    "description",
    "session_type",
    "visibility",
    "duration_minutes",
    "location",
    "max_participants",
    "price",
    "currency",
)

_NON_NULLABLE_FIELDS = frozenset({
    "title",
    "session_type",
    "visibility",
    "scheduled_at",
    "duration_minutes",
    "currency",
    "status",
    "is_recurring",
})


def copy_session_fields(source: SessionModel) -> dict[str, Any]:
    """Descriptive, capacity, pricing, visibility and group fields of a session."""
    return {field: getattr(source, field) for field in COPIED_FIELDS}


def validate_recurrence(
    is_recurring: bool,
    raw_rule: Any,
    scheduled_at: datetime,
) -> dict | None:
    """
    Check recurring consistency and return the rule as stored on the row.

    Non-recurring sessions never carry a rule.

    Raises:
        InvalidRecurrenceRuleError: If a recurring session has no valid rule
    """
    if not is_recurring:
        return None
    rule = parse_recurring_rule(raw_rule)
    if rule.end_date is not None and rule.end_date < scheduled_at.date():
        raise InvalidRecurrenceRuleError(
            "Recurring rule ends before the first occurrence",
            details={"end_date": rule.end_date.isoformat()},
        )
    return dump_recurring_rule(rule)


class SessionService:
    """Session lifecycle orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        visibility: VisibilityEvaluator,
        memberships: GroupMembershipLookup,
        clients: ClientRelationshipLookup,
        notifier: NotificationDispatcher,
        settings: SchedulingSettings,
        clock: Clock = utcnow,
        locks: SessionLockRegistry = session_locks,
    ) -> None:
        """
        Initialize session service.

        Args:
            db: Async SQLAlchemy session (request scoped)
            visibility: Visibility rules evaluator
            memberships: Group membership lookup
            clients: Instructor-client relationship lookup
            notifier: Best-effort notification dispatcher
            settings: Scheduling policy
            clock: Source of "now"
            locks: Per-session lock registry for capacity-sensitive writes
        """
        self.db = db
        self.visibility = visibility
        self.memberships = memberships
        self.clients = clients
        self.notifier = notifier
        self.settings = settings
        self.clock = clock
        self.locks = locks

    # ------------------------------------------------------------------ helpers

    async def _get_live(self, session_id: UUID) -> SessionModel:
        session = await session_crud.get_live(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    @staticmethod
    def _assert_instructor(session: SessionModel, caller_id: UUID, action: str) -> None:
        if session.instructor_id != caller_id:
            raise AccessDeniedError(
                f"Only the instructor can {action} this session",
                {"session_id": str(session.id), "caller_id": str(caller_id)},
            )

    async def _assert_group_member(self, group_id: UUID, user_id: UUID) -> None:
        if not await self.memberships.is_active_member(group_id, user_id):
            raise AccessDeniedError(
                "You are not a member of this group",
                {"group_id": str(group_id), "user_id": str(user_id)},
            )

    def _check_pagination(self, page: int, limit: int) -> None:
        if page < 1:
            raise ValidationError("Page must be at least 1", field="page")
        if not 1 <= limit <= self.settings.max_page_size:
            raise ValidationError(
                f"Limit must be between 1 and {self.settings.max_page_size}", field="limit"
            )

    async def _active_participants(self, session_id: UUID) -> list[SessionParticipantModel]:
        return list(await participant_crud.list_for_session(self.db, session_id, active_only=True))

    def _notify_participants(
        self,
        participants: list[SessionParticipantModel],
        kind: NotificationKind,
        session: SessionModel,
    ) -> None:
        context = {
            "session_id": str(session.id),
            "title": session.title,
            "scheduled_at": to_iso(session.scheduled_at),
        }
        self.notifier.dispatch_many([
            Notification(user_id=p.user_id, kind=kind, context=context) for p in participants
        ])

    def _notify_instructor(
        self,
        session: SessionModel,
        kind: NotificationKind,
        participant_id: UUID,
    ) -> None:
        self.notifier.dispatch(Notification(
            user_id=session.instructor_id,
            kind=kind,
            context={
                "session_id": str(session.id),
                "title": session.title,
                "participant_id": str(participant_id),
            },
        ))

    # ---------------------------------------------------------------- sessions

    async def create_session(self, instructor_id: UUID, request: CreateSessionRequest) -> SessionModel:
        """
        Create a session owned by the caller.

        Args:
            instructor_id: Caller, becomes the owning instructor
            request: Session fields

        Returns:
            SessionModel: The created session

        Raises:
            AccessDeniedError: If group_id is set and the caller is not an active member
            InvalidRecurrenceRuleError: If a recurring session lacks a valid rule
        """
        if request.group_id is not None:
            await self._assert_group_member(request.group_id, instructor_id)

        recurring_rule = validate_recurrence(
            request.is_recurring, request.recurring_rule, request.scheduled_at
        )
        session = await session_crud.create(
            self.db,
            instructor_id=instructor_id,
            group_id=request.group_id,
            title=request.title,
            description=request.description,
            session_type=request.session_type,
            visibility=request.visibility,
            scheduled_at=request.scheduled_at,
            duration_minutes=request.duration_minutes,
            location=request.location,
            max_participants=request.max_participants,
            price=request.price,
            currency=request.currency or self.settings.default_currency,
            status=request.status,
            is_recurring=request.is_recurring,
            recurring_rule=recurring_rule,
        )
        await self.db.commit()

        logger.info(
            "Session created",
            extra={
                "session_id": str(session.id),
                "instructor_id": str(instructor_id),
                "is_recurring": session.is_recurring,
            },
        )
        return session

    async def get_session(self, session_id: UUID, caller_id: UUID) -> SessionDetailResponse:
        """
        Read a session with its non-cancelled participants.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            AccessDeniedError: If no visibility rule grants the caller access
        """
        session = await self._get_live(session_id)
        await self.visibility.assert_can_view(session, caller_id)

        participants = await self._active_participants(session.id)
        return SessionDetailResponse(
            **SessionResponse.model_validate(session).model_dump(),
            participants=[ParticipantResponse.model_validate(p) for p in participants],
        )

    async def update_session(
        self,
        session_id: UUID,
        caller_id: UUID,
        request: UpdateSessionRequest,
    ) -> SessionModel:
        """
        Apply a partial update.

        Cancelling a session notifies every non-cancelled participant.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            AccessDeniedError: If the caller is not the instructor
            ValidationError: If a required field is explicitly nulled
            InvalidRecurrenceRuleError: If the result would be recurring without a valid rule
        """
        session = await self._get_live(session_id)
        self._assert_instructor(session, caller_id, "update")

        changes = request.model_dump(exclude_unset=True)
        for field in _NON_NULLABLE_FIELDS & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"{field} cannot be null", field=field)

        new_group_id = changes.get("group_id")
        if new_group_id is not None and new_group_id != session.group_id:
            await self._assert_group_member(new_group_id, caller_id)

        changes["recurring_rule"] = validate_recurrence(
            changes.get("is_recurring", session.is_recurring),
            changes.get("recurring_rule", session.recurring_rule),
            changes.get("scheduled_at", session.scheduled_at),
        )

        previous_status = session.status
        cancelling = (
            changes.get("status") == SessionStatus.CANCELLED
            and previous_status != SessionStatus.CANCELLED
        )
        participants = await self._active_participants(session.id) if cancelling else []

        session = await session_crud.update(self.db, session, **changes)
        await self.db.commit()

        logger.info(
            "Session updated",
            extra={
                "session_id": str(session.id),
                "fields": sorted(changes),
                "previous_status": previous_status.value,
                "status": session.status.value,
            },
        )
        if cancelling:
            self._notify_participants(participants, NotificationKind.SESSION_CANCELLED, session)
        return session

    async def delete_session(self, session_id: UUID, caller_id: UUID) -> None:
        """
        Logically delete a session and notify its active participants.

        Raises:
            SessionNotFoundError: If the session does not exist or was already deleted
            AccessDeniedError: If the caller is not the instructor
        """
        now = self.clock()
        session = await self._get_live(session_id)
        self._assert_instructor(session, caller_id, "delete")

        participants = await self._active_participants(session.id)
        await session_crud.soft_delete(self.db, session, deleted_at=now)
        await self.db.commit()

        logger.info(
            "Session deleted",
            extra={"session_id": str(session.id), "notified": len(participants)},
        )
        self._notify_participants(participants, NotificationKind.SESSION_DELETED, session)

    async def clone_session(
        self,
        session_id: UUID,
        caller_id: UUID,
        new_scheduled_at: datetime,
    ) -> SessionModel:
        """
        Copy a session to a new start time.

        The copy is SCHEDULED, not recurring and has no participants.

        Raises:
            SessionNotFoundError: If the source does not exist or was deleted
            AccessDeniedError: If the caller is not the instructor
        """
        source = await self._get_live(session_id)
        self._assert_instructor(source, caller_id, "clone")

        clone = await session_crud.create(
            self.db,
            **copy_session_fields(source),
            scheduled_at=new_scheduled_at,
            status=SessionStatus.SCHEDULED,
            is_recurring=False,
            recurring_rule=None,
        )
        await self.db.commit()

        logger.info(
            "Session cloned",
            extra={"source_id": str(source.id), "session_id": str(clone.id)},
        )
        return clone

    async def preview_occurrences(
        self,
        session_id: UUID,
        caller_id: UUID,
        weeks: int | None = None,
    ) -> RecurrencePreviewResponse:
        """
        Preview the occurrences of a recurring template.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            AccessDeniedError: If the caller is not the instructor
            InvalidRecurrenceRuleError: If the session is not a valid recurring template
            ValidationError: If weeks is out of range
        """
        session = await self._get_live(session_id)
        self._assert_instructor(session, caller_id, "preview")
        if not session.is_recurring:
            raise InvalidRecurrenceRuleError(
                "Session is not recurring", details={"session_id": str(session.id)}
            )

        if weeks is None:
            weeks = self.settings.default_horizon_weeks
        rule = parse_recurring_rule(session.recurring_rule)
        occurrences = compute_occurrences(session.scheduled_at, rule, weeks, include_first=True)
        return RecurrencePreviewResponse(
            session_id=session.id,
            weeks=weeks,
            occurrences=[to_iso(o) for o in occurrences],
        )

    # ------------------------------------------------------------ registration

    async def join_session(self, session_id: UUID, caller_id: UUID) -> SessionParticipantModel:
        """
        Register the caller for a session.

        A previously cancelled registration is reactivated rather than
        duplicated. Joins on one session are serialized so that capacity
        cannot be exceeded.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            AccessDeniedError: If the caller cannot see the session
            SelfJoinError: If the caller is the instructor
            AlreadyRegisteredError: If the caller holds an active registration
            SessionFullError: If max_participants seats are taken
        """
        async with self.locks.hold(session_id):
            session = await session_crud.get_live_for_update(self.db, session_id)
            if session is None:
                raise SessionNotFoundError(session_id)

            await self.visibility.assert_can_view(session, caller_id)
            if session.instructor_id == caller_id:
                raise SelfJoinError(session_id)

            existing = await participant_crud.get_for_user(self.db, session_id, caller_id)
            if existing is not None and existing.status != ParticipantStatus.CANCELLED:
                raise AlreadyRegisteredError(session_id, caller_id)

            if session.max_participants is not None:
                taken = await participant_crud.count_occupying(self.db, session_id)
                if taken >= session.max_participants:
                    raise SessionFullError(session_id, session.max_participants)

            if existing is not None:
                participant = await participant_crud.update(
                    self.db,
                    existing,
                    status=ParticipantStatus.REGISTERED,
                    checked_in_at=None,
                )
            else:
                participant = await participant_crud.create(
                    self.db,
                    session_id=session_id,
                    user_id=caller_id,
                    status=ParticipantStatus.REGISTERED,
                )
            await self.db.commit()

        logger.info(
            "Participant joined",
            extra={
                "session_id": str(session_id),
                "user_id": str(caller_id),
                "reactivated": existing is not None,
            },
        )
        self._notify_instructor(session, NotificationKind.PARTICIPANT_JOINED, caller_id)
        return participant

    async def leave_session(self, session_id: UUID, caller_id: UUID) -> SessionParticipantModel:
        """
        Cancel the caller's registration.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            ParticipantNotFoundError: If the caller has no active registration
            CancellationCutoffError: If the session starts within the cutoff
        """
        now = self.clock()
        session = await self._get_live(session_id)

        participant = await participant_crud.get_for_user(self.db, session_id, caller_id)
        if participant is None or not can_transition(participant.status, ParticipantStatus.CANCELLED):
            raise ParticipantNotFoundError(
                "You do not have an active registration for this session", session_id, caller_id
            )

        cutoff = timedelta(hours=self.settings.cancellation_cutoff_hours)
        if now > session.scheduled_at - cutoff:
            raise CancellationCutoffError(session_id, self.settings.cancellation_cutoff_hours)

        previous_status = participant.status
        participant = await participant_crud.update(
            self.db, participant, status=ParticipantStatus.CANCELLED
        )
        await self.db.commit()

        logger.info(
            "Participant left",
            extra={
                "session_id": str(session_id),
                "user_id": str(caller_id),
                "previous_status": previous_status.value,
            },
        )
        self._notify_instructor(session, NotificationKind.PARTICIPANT_LEFT, caller_id)
        return participant

    async def confirm_registration(self, session_id: UUID, caller_id: UUID) -> SessionParticipantModel:
        """
        Move the caller's REGISTERED row to CONFIRMED.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            ParticipantNotFoundError: If the caller has no REGISTERED row
        """
        await self._get_live(session_id)

        participant = await participant_crud.get_for_user(self.db, session_id, caller_id)
        if participant is None or participant.status != ParticipantStatus.REGISTERED:
            raise ParticipantNotFoundError(
                "No pending registration found for this session", session_id, caller_id
            )

        participant = await participant_crud.update(
            self.db, participant, status=ParticipantStatus.CONFIRMED
        )
        await self.db.commit()

        logger.info(
            "Registration confirmed",
            extra={"session_id": str(session_id), "user_id": str(caller_id)},
        )
        return participant

    async def self_check_in(self, session_id: UUID, caller_id: UUID) -> SessionParticipantModel:
        """
        Mark the caller as attended within the check-in window.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            ParticipantNotFoundError: If the caller has no REGISTERED/CONFIRMED row
            CheckInWindowError: If now is outside the window around the start
        """
        now = self.clock()
        session = await self._get_live(session_id)

        participant = await participant_crud.get_for_user(self.db, session_id, caller_id)
        if participant is None or not can_transition(participant.status, ParticipantStatus.ATTENDED):
            raise ParticipantNotFoundError(
                "You are not registered for this session", session_id, caller_id
            )

        opens_at = session.scheduled_at - timedelta(minutes=self.settings.check_in_opens_minutes)
        closes_at = session.scheduled_at + timedelta(minutes=self.settings.check_in_closes_minutes)
        if not opens_at <= now <= closes_at:
            raise CheckInWindowError(session_id, to_iso(opens_at), to_iso(closes_at))

        participant = await participant_crud.update(
            self.db,
            participant,
            status=ParticipantStatus.ATTENDED,
            checked_in_at=now,
        )
        await self.db.commit()

        logger.info(
            "Participant checked in",
            extra={"session_id": str(session_id), "user_id": str(caller_id)},
        )
        return participant

    async def update_participant_status(
        self,
        session_id: UUID,
        participant_user_id: UUID,
        instructor_id: UUID,
        new_status: ParticipantStatus,
    ) -> SessionParticipantModel:
        """
        Instructor override of a participant's status.

        Any status may be set. Entering ATTENDED stamps the check-in time
        when it is not set yet. The participant is notified only when the
        status actually changed.

        Raises:
            SessionNotFoundError: If the session does not exist or was deleted
            AccessDeniedError: If the caller is not the instructor
            ParticipantNotFoundError: If the user never registered
        """
        now = self.clock()
        session = await self._get_live(session_id)
        self._assert_instructor(session, instructor_id, "manage participants of")

        participant = await participant_crud.get_for_user(self.db, session_id, participant_user_id)
        if participant is None:
            raise ParticipantNotFoundError(
                "Participant not found", session_id, participant_user_id
            )

        previous_status = participant.status
        changes: dict[str, Any] = {"status": new_status}
        if new_status == ParticipantStatus.ATTENDED and participant.checked_in_at is None:
            changes["checked_in_at"] = now

        participant = await participant_crud.update(self.db, participant, **changes)
        await self.db.commit()

        logger.info(
            "Participant status updated",
            extra={
                "session_id": str(session_id),
                "user_id": str(participant_user_id),
                "previous_status": previous_status.value,
                "status": new_status.value,
            },
        )
        if previous_status != new_status:
            self.notifier.dispatch(Notification(
                user_id=participant_user_id,
                kind=NotificationKind.PARTICIPANT_STATUS_CHANGED,
                context={
                    "session_id": str(session.id),
                    "title": session.title,
                    "previous_status": previous_status.value,
                    "status": new_status.value,
                },
            ))
        return participant

    # ------------------------------------------------------------------- views

    async def get_my_sessions(
        self,
        caller_id: UUID,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[SessionResponse]:
        """
        Page through every session relevant to the caller, each exactly once.

        Covers sessions the caller instructs, GROUP/PUBLIC sessions of the
        caller's groups, CLIENTS sessions of instructors the caller is an
        active client of, sessions the caller is registered for and all
        PUBLIC sessions.

        Raises:
            ValidationError: If page or limit is out of range
        """
        self._check_pagination(page, limit)
        group_ids = await self.memberships.list_user_group_ids(caller_id)
        instructor_ids = await self.clients.list_active_client_instructor_ids(caller_id)

        items, total = await session_crud.list_visible_to(
            self.db,
            user_id=caller_id,
            group_ids=group_ids,
            client_instructor_ids=instructor_ids,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return PaginatedResponse[SessionResponse].build(
            [SessionResponse.model_validate(s) for s in items], total, page, limit
        )

    async def discover_sessions(
        self,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
    ) -> PaginatedResponse[SessionResponse]:
        """
        Page through upcoming PUBLIC sessions that are not completed or cancelled.

        Raises:
            ValidationError: If page, limit or search is out of range
        """
        self._check_pagination(page, limit)
        if search is not None:
            search = search.strip()
            if len(search) > 100:
                raise ValidationError("Search must be at most 100 characters", field="search")

        items, total = await session_crud.discover_public(
            self.db,
            now=self.clock(),
            search=search or None,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return PaginatedResponse[SessionResponse].build(
            [SessionResponse.model_validate(s) for s in items], total, page, limit
        )
