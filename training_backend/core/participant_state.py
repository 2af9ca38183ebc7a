"""
Participant status transitions.

Self-service operations (confirm, leave, check-in) must follow the
transition table below. Instructor overrides may set any status and do
not consult it.

    REGISTERED -> CONFIRMED | CANCELLED | ATTENDED | NO_SHOW
    CONFIRMED  -> ATTENDED | NO_SHOW | CANCELLED

CANCELLED, ATTENDED and NO_SHOW have no further self-service
transitions. A cancelled participant who joins again is reactivated to
REGISTERED by the join operation.

Dependencies: training_backend.core.enums
System role: Participant state machine
"""

from training_backend.core.enums import ParticipantStatus

ALLOWED_TRANSITIONS: dict[ParticipantStatus, frozenset[ParticipantStatus]] = {
    ParticipantStatus.REGISTERED: frozenset({
        ParticipantStatus.CONFIRMED,
        ParticipantStatus.CANCELLED,
        ParticipantStatus.ATTENDED,
        ParticipantStatus.NO_SHOW,
    }),
    ParticipantStatus.CONFIRMED: frozenset({
        ParticipantStatus.ATTENDED,
        ParticipantStatus.NO_SHOW,
        ParticipantStatus.CANCELLED,
    }),
    ParticipantStatus.ATTENDED: frozenset(),
    ParticipantStatus.NO_SHOW: frozenset(),
    ParticipantStatus.CANCELLED: frozenset(),
}


def can_transition(current: ParticipantStatus, target: ParticipantStatus) -> bool:
    """Return True if a self-service transition from current to target is allowed."""
    return target in ALLOWED_TRANSITIONS[current]
