"""
Session API endpoints.

Routes:
- POST /sessions - Create session
- GET /sessions - Sessions relevant to the caller (paginated)
- GET /sessions/discover - Upcoming public sessions (paginated, searchable)
- GET /sessions/{id} - Get session with participants
- PATCH /sessions/{id} - Update session
- DELETE /sessions/{id} - Logically delete session
- POST /sessions/{id}/clone - Copy session to a new start time
- GET /sessions/{id}/recurrence-preview - Preview recurring occurrences
- POST /sessions/{id}/generate-instances - Materialize recurring instances
- POST /sessions/{id}/join - Register caller
- POST /sessions/{id}/leave - Cancel caller's registration
- POST /sessions/{id}/confirm - Confirm caller's registration
- POST /sessions/{id}/check-in - Caller self check-in
- PATCH /sessions/{id}/participants/{user_id} - Instructor sets a participant's status

Caller identity comes from the X-User-Id header.

Dependencies: training_backend.application.services, training_backend.models
System role: Session management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from training_backend.api.deps.dependencies import (
    get_caller_id,
    get_instance_service,
    get_session_service,
)
from training_backend.application.services import InstanceService, SessionService
from training_backend.models.common import PaginatedResponse
from training_backend.models.session import (
    CloneSessionRequest,
    CreateSessionRequest,
    GenerateInstancesRequest,
    GenerateInstancesResponse,
    ParticipantResponse,
    RecurrencePreviewResponse,
    SessionDetailResponse,
    SessionResponse,
    UpdateParticipantStatusRequest,
    UpdateSessionRequest,
)

from .session_error_handling import handle_session_errors
from .session_responses import map_participant_to_response, map_session_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
@handle_session_errors
async def create_session(
    request: CreateSessionRequest,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create a session owned by the caller.

    Raises:
        HTTPException(400): Invalid recurring rule
        HTTPException(403): Caller is not a member of the target group
    """
    session = await session_service.create_session(caller_id, request)
    return map_session_to_response(session)


@router.get("", response_model=PaginatedResponse[SessionResponse])
@handle_session_errors
async def list_my_sessions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> PaginatedResponse[SessionResponse]:
    """List every session relevant to the caller, each exactly once."""
    return await session_service.get_my_sessions(caller_id, page=page, limit=limit)


@router.get("/discover", response_model=PaginatedResponse[SessionResponse])
@handle_session_errors
async def discover_sessions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, max_length=100),
    session_service: SessionService = Depends(get_session_service),
) -> PaginatedResponse[SessionResponse]:
    """List upcoming public sessions, optionally filtered by a search term."""
    return await session_service.discover_sessions(page=page, limit=limit, search=search)


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_session_errors
async def get_session(
    session_id: UUID,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> SessionDetailResponse:
    """
    Get a session with its participants.

    Raises:
        HTTPException(403): Session not visible to the caller
        HTTPException(404): Session not found
    """
    return await session_service.get_session(session_id, caller_id)


@router.patch("/{session_id}", response_model=SessionResponse)
@handle_session_errors
async def update_session(
    session_id: UUID,
    request: UpdateSessionRequest,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Partially update a session (instructor only)."""
    session = await session_service.update_session(session_id, caller_id, request)
    return map_session_to_response(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_session_errors
async def delete_session(
    session_id: UUID,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> None:
    """Logically delete a session (instructor only)."""
    await session_service.delete_session(session_id, caller_id)


@router.post(
    "/{session_id}/clone",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_session_errors
async def clone_session(
    session_id: UUID,
    request: CloneSessionRequest,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Copy a session to a new start time (instructor only)."""
    clone = await session_service.clone_session(session_id, caller_id, request.scheduled_at)
    return map_session_to_response(clone)


@router.get("/{session_id}/recurrence-preview", response_model=RecurrencePreviewResponse)
@handle_session_errors
async def preview_recurrence(
    session_id: UUID,
    weeks: int | None = Query(None, ge=1, le=52),
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> RecurrencePreviewResponse:
    """Preview the occurrences of a recurring template (instructor only)."""
    return await session_service.preview_occurrences(session_id, caller_id, weeks)


@router.post(
    "/{session_id}/generate-instances",
    response_model=GenerateInstancesResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_session_errors
async def generate_instances(
    session_id: UUID,
    request: GenerateInstancesRequest | None = None,
    caller_id: UUID = Depends(get_caller_id),
    instance_service: InstanceService = Depends(get_instance_service),
) -> GenerateInstancesResponse:
    """
    Materialize the missing instances of a recurring template.

    Calling again with the same horizon creates nothing new.
    """
    weeks = request.weeks if request is not None else None
    return await instance_service.generate_instances(session_id, caller_id, weeks)


@router.post(
    "/{session_id}/join",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_session_errors
async def join_session(
    session_id: UUID,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> ParticipantResponse:
    """
    Register the caller for a session.

    Raises:
        HTTPException(403): Session not visible to the caller
        HTTPException(409): Own session, already registered, or session full
    """
    participant = await session_service.join_session(session_id, caller_id)
    return map_participant_to_response(participant)


@router.post("/{session_id}/leave", response_model=ParticipantResponse)
@handle_session_errors
async def leave_session(
    session_id: UUID,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> ParticipantResponse:
    """Cancel the caller's registration (rejected close to the start)."""
    participant = await session_service.leave_session(session_id, caller_id)
    return map_participant_to_response(participant)


@router.post("/{session_id}/confirm", response_model=ParticipantResponse)
@handle_session_errors
async def confirm_registration(
    session_id: UUID,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> ParticipantResponse:
    """Confirm the caller's pending registration."""
    participant = await session_service.confirm_registration(session_id, caller_id)
    return map_participant_to_response(participant)


@router.post("/{session_id}/check-in", response_model=ParticipantResponse)
@handle_session_errors
async def self_check_in(
    session_id: UUID,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> ParticipantResponse:
    """Check the caller in during the check-in window."""
    participant = await session_service.self_check_in(session_id, caller_id)
    return map_participant_to_response(participant)


@router.patch("/{session_id}/participants/{user_id}", response_model=ParticipantResponse)
@handle_session_errors
async def update_participant_status(
    session_id: UUID,
    user_id: UUID,
    request: UpdateParticipantStatusRequest,
    caller_id: UUID = Depends(get_caller_id),
    session_service: SessionService = Depends(get_session_service),
) -> ParticipantResponse:
    """Set a participant's status (instructor only)."""
    participant = await session_service.update_participant_status(
        session_id, user_id, caller_id, request.status
    )
    return map_participant_to_response(participant)
