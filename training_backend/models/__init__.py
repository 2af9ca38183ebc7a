"""
API and domain schemas.

Exports the request/response contracts and the recurring rule variants.

Dependencies: pydantic
System role: Data contracts shared by the API and application layers
"""

from training_backend.models.common import ErrorResponse, PaginatedResponse
from training_backend.models.recurrence import (
    DailyRule,
    MonthlyRule,
    RecurringRule,
    WeeklyRule,
    dump_recurring_rule,
    parse_recurring_rule,
)
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

__all__ = [
    "CloneSessionRequest",
    "CreateSessionRequest",
    "DailyRule",
    "ErrorResponse",
    "GenerateInstancesRequest",
    "GenerateInstancesResponse",
    "MonthlyRule",
    "PaginatedResponse",
    "ParticipantResponse",
    "RecurrencePreviewResponse",
    "RecurringRule",
    "SessionDetailResponse",
    "SessionResponse",
    "UpdateParticipantStatusRequest",
    "UpdateSessionRequest",
    "WeeklyRule",
    "dump_recurring_rule",
    "parse_recurring_rule",
]
