"""
Test suite for best-effort notification dispatch and senders.

System role: Verification that notification failures never propagate
"""

import json
import logging
import uuid
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from training_backend.application.notifications import (
    LoggingNotificationSender,
    Notification,
    NotificationDispatcher,
    NotificationKind,
    build_notification_sender,
)
from training_backend.boundary.aws.sqs_notifier import SqsNotificationSender
from training_backend.configs.notifications import NotificationSettings


def make_notification(kind: NotificationKind = NotificationKind.PARTICIPANT_JOINED) -> Notification:
    return Notification(user_id=uuid.uuid4(), kind=kind, context={"session_id": "abc"})


def throttled() -> ClientError:
    return ClientError(
        {"Error": {"Code": "ThrottlingException", "Message": "slow down"}},
        "SendMessage",
    )


class TestNotificationDispatcher:
    """Test suite for NotificationDispatcher."""

    @pytest.mark.asyncio
    async def test_dispatch_delivers_after_drain(self, sender) -> None:
        """Test dispatched notifications reach the sender."""
        # Arrange
        dispatcher = NotificationDispatcher(sender)
        notification = make_notification()

        # Act
        dispatcher.dispatch(notification)
        await dispatcher.drain()

        # Assert
        assert sender.sent == [(notification.user_id, "PARTICIPANT_JOINED", {"session_id": "abc"})]
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_dispatch_does_not_wait_for_delivery(self, sender) -> None:
        """Test dispatch returns before the sender runs."""
        dispatcher = NotificationDispatcher(sender)

        dispatcher.dispatch(make_notification())

        assert sender.sent == []
        assert dispatcher.pending == 1
        await dispatcher.drain()

    @pytest.mark.asyncio
    async def test_sender_failure_is_logged_not_raised(self, failing_sender, caplog) -> None:
        """Test a failing sender is swallowed and logged."""
        # Arrange
        dispatcher = NotificationDispatcher(failing_sender)

        # Act
        with caplog.at_level(logging.ERROR):
            dispatcher.dispatch_many([make_notification(), make_notification()])
            await dispatcher.drain()

        # Assert
        assert failing_sender.attempts == 2
        failures = [r for r in caplog.records if r.getMessage() == "Notification delivery failed"]
        assert len(failures) == 2
        assert failures[0].error_type == "RuntimeError"


class TestBuildNotificationSender:
    """Test suite for build_notification_sender()."""

    def test_log_backend_by_default(self) -> None:
        settings = NotificationSettings(_env_file=None)

        assert isinstance(build_notification_sender(settings), LoggingNotificationSender)

    def test_sqs_backend_requires_queue_url(self) -> None:
        settings = NotificationSettings(_env_file=None, backend="sqs")

        with pytest.raises(ValueError):
            build_notification_sender(settings)


class TestSqsNotificationSender:
    """Test suite for SqsNotificationSender."""

    @pytest.mark.asyncio
    async def test_send_publishes_json_message(self) -> None:
        """Test the notification is serialized into the SQS message body."""
        # Arrange
        client = MagicMock()
        client.send_message.return_value = {"MessageId": "m-1"}
        sender = SqsNotificationSender(queue_url="https://sqs.test/q", client=client)
        user_id = uuid.uuid4()

        # Act
        await sender.send(user_id, "SESSION_CANCELLED", {"title": "Yoga"})

        # Assert
        kwargs = client.send_message.call_args.kwargs
        assert kwargs["QueueUrl"] == "https://sqs.test/q"
        assert json.loads(kwargs["MessageBody"]) == {
            "user_id": str(user_id),
            "kind": "SESSION_CANCELLED",
            "context": {"title": "Yoga"},
        }
        assert kwargs["MessageAttributes"]["kind"]["StringValue"] == "SESSION_CANCELLED"

    @pytest.mark.asyncio
    async def test_send_retries_transient_errors(self) -> None:
        """Test a throttled send is retried."""
        client = MagicMock()
        client.send_message.side_effect = [throttled(), {"MessageId": "m-2"}]
        sender = SqsNotificationSender(queue_url="q", max_attempts=2, client=client)

        await sender.send(uuid.uuid4(), "PARTICIPANT_LEFT", {})

        assert client.send_message.call_count == 2

    @pytest.mark.asyncio
    async def test_send_raises_after_last_attempt(self) -> None:
        """Test the error propagates once attempts are exhausted."""
        client = MagicMock()
        client.send_message.side_effect = throttled()
        sender = SqsNotificationSender(queue_url="q", max_attempts=1, client=client)

        with pytest.raises(ClientError):
            await sender.send(uuid.uuid4(), "PARTICIPANT_LEFT", {})
