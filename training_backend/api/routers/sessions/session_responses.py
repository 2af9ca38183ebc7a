"""
Session response mapping utilities.

Converts ORM rows returned by the services into API response schemas.
"""

from training_backend.boundary.db.models.participant_model import SessionParticipantModel
from training_backend.boundary.db.models.session_model import SessionModel
from training_backend.models.session import ParticipantResponse, SessionResponse


def map_session_to_response(session: SessionModel) -> SessionResponse:
    """Map a session row to SessionResponse."""
    return SessionResponse.model_validate(session)


def map_participant_to_response(participant: SessionParticipantModel) -> ParticipantResponse:
    """Map a participant row to ParticipantResponse."""
    return ParticipantResponse.model_validate(participant)
