"""
Dependency injection container.

Factory functions for FastAPI dependencies. Services are built per
request around the request-scoped database session; the notification
dispatcher is process wide so in-flight deliveries can be drained on
shutdown.

Dependencies: training_backend.configs, training_backend.application, training_backend.boundary
System role: DI container for service injection
"""

from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from training_backend.application.notifications import (
    NotificationDispatcher,
    build_notification_sender,
)
from training_backend.application.services import InstanceService, SessionService
from training_backend.boundary.db import (
    SqlClientRelationshipLookup,
    SqlGroupMembershipLookup,
    SqlParticipantLookup,
    get_async_db,
)
from training_backend.configs import Settings, get_settings
from training_backend.core.clock import Clock, utcnow
from training_backend.core.visibility import VisibilityEvaluator

USER_ID_HEADER = "X-User-Id"


def get_settings_dependency() -> Settings:
    """
    Get application settings.

    Returns:
        Settings: Cached application settings
    """
    return get_settings()


def get_clock() -> Clock:
    """Time source for services (overridden in tests)."""
    return utcnow


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    """
    Get the process-wide notification dispatcher.

    Returns:
        NotificationDispatcher: Dispatcher wrapping the configured sender
    """
    sender = build_notification_sender(get_settings().notifications)
    return NotificationDispatcher(sender)


def get_caller_id(x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER)) -> UUID:
    """
    Resolve the calling user from the identity header set by the auth gateway.

    Raises:
        HTTPException(401): Header missing
        HTTPException(400): Header is not a UUID
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {USER_ID_HEADER} header",
        )
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {USER_ID_HEADER} header",
        )


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    clock: Clock = Depends(get_clock),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected)
        dispatcher: Notification dispatcher (injected)
        clock: Time source (injected)

    Returns:
        SessionService: Session service wired to SQL-backed lookups
    """
    memberships = SqlGroupMembershipLookup(db)
    clients = SqlClientRelationshipLookup(db)
    visibility = VisibilityEvaluator(memberships, clients, SqlParticipantLookup(db))
    return SessionService(
        db=db,
        visibility=visibility,
        memberships=memberships,
        clients=clients,
        notifier=dispatcher,
        settings=settings.scheduling,
        clock=clock,
    )


def get_instance_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> InstanceService:
    """
    Get instance service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected)

    Returns:
        InstanceService: Recurring instance materializer
    """
    return InstanceService(db=db, settings=settings.scheduling)
