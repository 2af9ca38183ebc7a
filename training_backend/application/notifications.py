"""
Best-effort notification dispatch.

Lifecycle operations notify instructors and participants after their
primary write has committed. Delivery runs in a detached task: a failing
sender is logged and never reaches the operation that triggered it.

Dependencies: asyncio, pydantic, training_backend.boundary.aws
System role: Fire-and-forget side effects of session lifecycle operations
"""

import asyncio
import enum
import logging
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from training_backend.boundary.aws.sqs_notifier import SqsNotificationSender
from training_backend.configs.notifications import NotificationSettings
from training_backend.core.interfaces import NotificationSender
from training_backend.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)


class NotificationKind(str, enum.Enum):
    """Events the external mailer knows how to render."""

    SESSION_CANCELLED = "SESSION_CANCELLED"
    SESSION_DELETED = "SESSION_DELETED"
    PARTICIPANT_JOINED = "PARTICIPANT_JOINED"
    PARTICIPANT_LEFT = "PARTICIPANT_LEFT"
    PARTICIPANT_STATUS_CHANGED = "PARTICIPANT_STATUS_CHANGED"


class Notification(BaseModel):
    """A single notification addressed to one user."""

    user_id: UUID
    kind: NotificationKind
    context: dict[str, Any] = Field(default_factory=dict)


class LoggingNotificationSender:
    """Development sender: writes notifications to the application log."""

    async def send(self, user_id: UUID, kind: str, context: dict[str, Any]) -> None:
        log_with_context(
            logger,
            logging.INFO,
            f"Notification {kind}",
            user_id=user_id,
            kind=kind,
            session_id=context.get("session_id"),
        )


class NotificationDispatcher:
    """
    Schedules notifications without awaiting their delivery.

    Each notification becomes its own task, so one slow or failing
    recipient does not hold up the others. ``drain`` waits for in-flight
    deliveries (application shutdown, tests).
    """

    def __init__(self, sender: NotificationSender) -> None:
        self.sender = sender
        self._pending: set[asyncio.Task] = set()

    def dispatch(self, notification: Notification) -> None:
        """Schedule delivery of one notification on the running loop."""
        task = asyncio.create_task(self._deliver(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def dispatch_many(self, notifications: list[Notification]) -> None:
        for notification in notifications:
            self.dispatch(notification)

    async def _deliver(self, notification: Notification) -> None:
        try:
            await self.sender.send(
                notification.user_id,
                notification.kind.value,
                notification.context,
            )
        except Exception as e:
            log_exception_with_context(
                logger,
                "Notification delivery failed",
                e,
                user_id=str(notification.user_id),
                kind=notification.kind.value,
            )

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    @property
    def pending(self) -> int:
        return len(self._pending)


def build_notification_sender(settings: NotificationSettings) -> NotificationSender:
    """
    Create the sender selected by configuration.

    Args:
        settings: Notification settings

    Returns:
        NotificationSender: SQS sender for backend 'sqs', logging sender otherwise

    Raises:
        ValueError: If backend is 'sqs' without a queue URL
    """
    if settings.backend == "sqs":
        if not settings.queue_url:
            raise ValueError("NOTIFICATIONS_QUEUE_URL is required for the sqs backend")
        return SqsNotificationSender(
            queue_url=settings.queue_url,
            region=settings.region,
            max_attempts=settings.max_attempts,
        )
    return LoggingNotificationSender()
