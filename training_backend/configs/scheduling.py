"""
Scheduling policy settings.

Time windows, horizons and pagination limits used by the session
lifecycle and instance generation services.

Dependencies: pydantic, pydantic_settings
System role: Business policy configuration for session scheduling
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from training_backend.configs.base import BaseSettings


class SchedulingSettings(BaseSettings):
    """Session scheduling policy configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SCHEDULING_",
        case_sensitive=False,
        extra="ignore",
    )

    cancellation_cutoff_hours: float = Field(
        default=2,
        ge=0,
        description="Participants cannot leave a session closer than this to its start",
    )
    check_in_opens_minutes: int = Field(
        default=15,
        ge=0,
        description="Self check-in opens this many minutes before the start",
    )
    check_in_closes_minutes: int = Field(
        default=30,
        ge=0,
        description="Self check-in closes this many minutes after the start",
    )
    default_horizon_weeks: int = Field(
        default=12,
        ge=1,
        le=52,
        description="Weeks covered by previews and instance generation by default",
    )
    default_currency: str = Field(
        default="RON",
        min_length=3,
        max_length=3,
        description="Currency applied when a session is created without one",
    )
    max_page_size: int = Field(default=100, ge=1, description="Maximum page size")
