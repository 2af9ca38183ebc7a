"""
Session domain models and schemas.

Request/response schemas for session and participant operations.
Timestamps are normalized to UTC on the way in. The recurring rule is
accepted as a plain object here and validated into its typed variant by
the session service, so rule errors surface as InvalidRecurrenceRuleError.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from training_backend.core.clock import ensure_utc
from training_backend.core.enums import (
    ParticipantStatus,
    SessionStatus,
    SessionType,
    SessionVisibility,
)


class CreateSessionRequest(BaseModel):
    """Request schema for creating a new session."""

    title: str = Field(..., min_length=1, max_length=255, description="Session title")
    description: str | None = Field(None, max_length=4096, description="Session description")
    session_type: SessionType = Field(..., description="Kind of training")
    visibility: SessionVisibility = Field(
        SessionVisibility.GROUP, description="Who may see and join the session"
    )
    group_id: uuid.UUID | None = Field(None, description="Group the session belongs to")
    scheduled_at: datetime = Field(..., description="Start time (stored as UTC)")
    duration_minutes: int = Field(..., ge=5, le=480, description="Length in minutes")
    location: str | None = Field(None, max_length=255, description="Location")
    max_participants: int | None = Field(
        None, ge=1, le=1000, description="Seat limit, unbounded when omitted"
    )
    price: float | None = Field(None, ge=0, description="Price per participant")
    currency: str | None = Field(
        None, min_length=3, max_length=3, description="ISO currency code (defaults to RON)"
    )
    status: SessionStatus = Field(SessionStatus.SCHEDULED, description="Initial status")
    is_recurring: bool = Field(False, description="Whether this session is a recurring template")
    recurring_rule: dict[str, Any] | None = Field(
        None, description="Recurring rule, required when is_recurring is set"
    )

    @field_validator("scheduled_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class UpdateSessionRequest(BaseModel):
    """Request schema for partially updating a session. Only sent fields are applied."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    session_type: SessionType | None = None
    visibility: SessionVisibility | None = None
    group_id: uuid.UUID | None = None
    scheduled_at: datetime | None = None
    duration_minutes: int | None = Field(None, ge=5, le=480)
    location: str | None = Field(None, max_length=255)
    max_participants: int | None = Field(None, ge=1, le=1000)
    price: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    status: SessionStatus | None = None
    is_recurring: bool | None = None
    recurring_rule: dict[str, Any] | None = None

    @field_validator("scheduled_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class CloneSessionRequest(BaseModel):
    """Request schema for cloning a session to a new start time."""

    scheduled_at: datetime = Field(..., description="Start time of the copy")

    @field_validator("scheduled_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class UpdateParticipantStatusRequest(BaseModel):
    """Instructor override of a participant's status."""

    status: ParticipantStatus


class GenerateInstancesRequest(BaseModel):
    """Request schema for materializing recurring instances."""

    weeks: int | None = Field(None, ge=1, le=52, description="Horizon in weeks (default 12)")


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    instructor_id: uuid.UUID
    group_id: uuid.UUID | None
    title: str
    description: str | None
    session_type: SessionType
    visibility: SessionVisibility
    scheduled_at: datetime
    duration_minutes: int
    location: str | None
    max_participants: int | None
    price: float | None
    currency: str
    status: SessionStatus
    is_recurring: bool
    recurring_rule: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


class ParticipantResponse(BaseModel):
    """Response schema for a registration."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    session_id: uuid.UUID
    user_id: uuid.UUID
    status: ParticipantStatus
    checked_in_at: datetime | None
    created_at: datetime
    updated_at: datetime


class SessionDetailResponse(SessionResponse):
    """Session with its non-cancelled participants."""

    participants: list[ParticipantResponse] = Field(default_factory=list)


class GenerateInstancesResponse(BaseModel):
    """Result of materializing recurring instances."""

    created_count: int
    created_sessions: list[SessionResponse]


class RecurrencePreviewResponse(BaseModel):
    """Occurrences of a recurring template, first occurrence included."""

    session_id: uuid.UUID
    weeks: int
    occurrences: list[str] = Field(description="ISO-8601 UTC timestamps")
