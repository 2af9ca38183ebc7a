"""
SQS notification sender.

Enqueues notification events for the external mailer. The boto3 call is
blocking, so it runs in a worker thread and is retried with exponential
backoff on transient AWS errors.

Dependencies: boto3, tenacity
System role: Queue-backed NotificationSender implementation
"""

import asyncio
import json
import logging
from typing import Any
from uuid import UUID

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)


class SqsNotificationSender:
    """Publishes one SQS message per notification."""

    def __init__(
        self,
        queue_url: str,
        region: str = "eu-central-1",
        max_attempts: int = 3,
        client: Any | None = None,
    ) -> None:
        """
        Initialize SQS sender.

        Args:
            queue_url: Target queue URL
            region: AWS region of the queue
            max_attempts: Attempts per message before the error propagates
            client: Optional preconfigured SQS client (tests)
        """
        self._queue_url = queue_url
        self._max_attempts = max_attempts
        self._sqs_client = client or boto3.client("sqs", region_name=region)

    def _send_with_retry(self, body: str, kind: str) -> str:
        """Send the message, retrying transient failures. Returns the SQS message id."""
        retrying = Retrying(
            retry=retry_if_exception_type((ClientError, BotoCoreError)),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=8, jitter=1),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:send - Retry {retry_state.attempt_number}/{self._max_attempts}"
            ),
            reraise=True,
        )
        response = retrying(
            self._sqs_client.send_message,
            QueueUrl=self._queue_url,
            MessageBody=body,
            MessageAttributes={"kind": {"DataType": "String", "StringValue": kind}},
        )
        return response.get("MessageId", "")

    async def send(self, user_id: UUID, kind: str, context: dict[str, Any]) -> None:
        """
        Enqueue a notification.

        Args:
            user_id: Recipient
            kind: Notification kind (e.g. PARTICIPANT_JOINED)
            context: Template variables for the mailer

        Raises:
            ClientError: If every attempt fails
        """
        body = json.dumps({"user_id": str(user_id), "kind": kind, "context": context}, default=str)
        message_id = await asyncio.to_thread(self._send_with_retry, body, kind)
        logger.debug(
            "Notification enqueued",
            extra={"user_id": str(user_id), "kind": kind, "message_id": message_id},
        )
