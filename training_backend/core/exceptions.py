"""
Exception hierarchy for the training session scheduler.

Services raise these; the API layer maps each family to a status code
(not found 404, permission 403, validation 400, conflict 409). ``details``
carries the identifiers involved; it is logged and returned to the client
as the ``details`` field of the error body.

Dependencies: None
System role: Error vocabulary shared by core, services and API
"""

from typing import Any
from uuid import UUID


class SchedulingException(Exception):
    """Base exception for all scheduling errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"


# --- Not found ---------------------------------------------------------------


class NotFoundError(SchedulingException):
    """Raised when a live row matching the request does not exist."""


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found (or is logically deleted)."""

    def __init__(self, session_id: UUID | str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = str(session_id)
        super().__init__(f"Session not found: {session_id}", details)


class ParticipantNotFoundError(NotFoundError):
    """Raised when the caller/user has no matching participant row."""

    def __init__(
        self,
        message: str,
        session_id: UUID | str,
        user_id: UUID | str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"session_id": str(session_id), "user_id": str(user_id)})
        super().__init__(message, details)


# --- Access denied -----------------------------------------------------------


class AccessDeniedError(SchedulingException):
    """Raised when a visibility rule or instructor-only check is not satisfied."""


# --- Validation --------------------------------------------------------------


class ValidationError(SchedulingException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidRecurrenceRuleError(ValidationError):
    """Raised when a recurring session carries a missing or malformed rule."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, field="recurring_rule", details=details)


# --- Conflicts ---------------------------------------------------------------


class ConflictError(SchedulingException):
    """Raised when the request conflicts with the session's current state."""


class SelfJoinError(ConflictError):
    """Raised when an instructor tries to join their own session."""

    def __init__(self, session_id: UUID | str) -> None:
        super().__init__(
            "You cannot join your own session",
            {"session_id": str(session_id)},
        )


class AlreadyRegisteredError(ConflictError):
    """Raised when the caller already holds an active registration."""

    def __init__(self, session_id: UUID | str, user_id: UUID | str) -> None:
        super().__init__(
            "You are already registered for this session",
            {"session_id": str(session_id), "user_id": str(user_id)},
        )


class SessionFullError(ConflictError):
    """Raised when a session has reached its participant capacity."""

    def __init__(self, session_id: UUID | str, max_participants: int) -> None:
        super().__init__(
            "Session is full",
            {"session_id": str(session_id), "max_participants": max_participants},
        )


class CancellationCutoffError(ConflictError):
    """Raised when leaving is attempted too close to the session start."""

    def __init__(self, session_id: UUID | str, cutoff_hours: float) -> None:
        super().__init__(
            f"Cannot cancel within {cutoff_hours:g} hours of session start",
            {"session_id": str(session_id), "cutoff_hours": cutoff_hours},
        )


class CheckInWindowError(ConflictError):
    """Raised when self check-in is attempted outside its window."""

    def __init__(
        self,
        session_id: UUID | str,
        opens_at: str,
        closes_at: str,
    ) -> None:
        super().__init__(
            "Check-in window is not active",
            {"session_id": str(session_id), "opens_at": opens_at, "closes_at": closes_at},
        )
