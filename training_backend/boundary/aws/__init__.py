"""AWS integrations (SQS notification queue)."""

from training_backend.boundary.aws.sqs_notifier import SqsNotificationSender

__all__ = ["SqsNotificationSender"]
