"""
Application services.

Use case orchestrators that coordinate CRUD, domain rules and side effects.
"""

from training_backend.application.services.instance_service import InstanceService
from training_backend.application.services.session_service import SessionService

__all__ = ["InstanceService", "SessionService"]
