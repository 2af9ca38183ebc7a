"""
Application settings root.

Nests one section per concern (database, scheduling, notifications) under
a single cached object that FastAPI dependencies and services share.

Dependencies: pydantic, training_backend.configs sections
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from training_backend.configs.base import BaseSettings
from training_backend.configs.database import DatabaseSettings
from training_backend.configs.notifications import NotificationSettings
from training_backend.configs.scheduling import SchedulingSettings


class Settings(BaseSettings):
    """Deployment settings plus every configuration section."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide settings, read from the environment on first call.

    Tests that change the environment must call ``get_settings.cache_clear()``.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()
