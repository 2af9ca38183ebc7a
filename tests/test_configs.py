"""
Test suite for configuration settings.

System role: Verification of defaults and environment variable mapping
"""

import pytest
from pydantic import ValidationError

from training_backend.configs.database import DatabaseSettings
from training_backend.configs.notifications import NotificationSettings
from training_backend.configs.scheduling import SchedulingSettings
from training_backend.configs.settings import Settings


class TestSchedulingSettings:
    """Test suite for SchedulingSettings."""

    def test_defaults(self) -> None:
        settings = SchedulingSettings(_env_file=None)

        assert settings.cancellation_cutoff_hours == 2
        assert settings.check_in_opens_minutes == 15
        assert settings.check_in_closes_minutes == 30
        assert settings.default_horizon_weeks == 12
        assert settings.default_currency == "RON"
        assert settings.max_page_size == 100

    def test_reads_prefixed_environment(self, monkeypatch) -> None:
        """Test SCHEDULING_ variables override defaults."""
        monkeypatch.setenv("SCHEDULING_CANCELLATION_CUTOFF_HOURS", "24")
        monkeypatch.setenv("SCHEDULING_DEFAULT_CURRENCY", "EUR")

        settings = SchedulingSettings(_env_file=None)

        assert settings.cancellation_cutoff_hours == 24
        assert settings.default_currency == "EUR"

    def test_rejects_horizon_above_a_year(self, monkeypatch) -> None:
        monkeypatch.setenv("SCHEDULING_DEFAULT_HORIZON_WEEKS", "60")

        with pytest.raises(ValidationError):
            SchedulingSettings(_env_file=None)


class TestDatabaseSettings:
    """Test suite for DatabaseSettings."""

    def test_async_url_uses_asyncpg(self, monkeypatch) -> None:
        monkeypatch.setenv("POSTGRES_HOST", "db.internal")
        monkeypatch.setenv("POSTGRES_DB", "scheduler")

        settings = DatabaseSettings(_env_file=None)

        assert settings.async_database_url.startswith("postgresql+asyncpg://")
        assert "@db.internal:5432/scheduler" in settings.async_database_url
        assert "ssl" not in settings.async_database_url

    def test_async_url_requires_ssl_when_configured(self, monkeypatch) -> None:
        monkeypatch.setenv("POSTGRES_SSLMODE", "require")

        settings = DatabaseSettings(_env_file=None)

        assert settings.async_database_url.endswith("?ssl=require")


class TestSettings:
    """Test suite for the aggregated Settings."""

    def test_aggregates_sections(self, monkeypatch) -> None:
        monkeypatch.setenv("NOTIFICATIONS_BACKEND", "sqs")
        monkeypatch.setenv("NOTIFICATIONS_QUEUE_URL", "https://sqs.test/q")

        settings = Settings(_env_file=None)

        assert isinstance(settings.scheduling, SchedulingSettings)
        assert isinstance(settings.notifications, NotificationSettings)
        assert settings.notifications.backend == "sqs"
        assert settings.notifications.queue_url == "https://sqs.test/q"
        assert settings.log_level == "INFO"
