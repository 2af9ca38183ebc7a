"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_caller_id,
    get_clock,
    get_instance_service,
    get_notification_dispatcher,
    get_session_service,
    get_settings_dependency,
)

__all__ = [
    "get_caller_id",
    "get_clock",
    "get_instance_service",
    "get_notification_dispatcher",
    "get_session_service",
    "get_settings_dependency",
]
