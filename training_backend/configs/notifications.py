"""
Notification delivery configuration.

Selects the notification sender and configures the SQS queue consumed
by the external mailer.

Dependencies: pydantic_settings
System role: Notification transport configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotificationSettings(BaseSettings):
    """Settings for best-effort participant/instructor notifications."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NOTIFICATIONS_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["log", "sqs"] = Field(
        default="log",
        description="Notification sender: 'log' writes to the application log, 'sqs' enqueues",
    )
    queue_url: str | None = Field(
        default=None,
        description="SQS queue URL for notification events (required for 'sqs')",
    )
    region: str = Field(
        default="eu-central-1",
        description="AWS region of the notification queue",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Send attempts per notification before giving up",
    )
