"""
Postgres connection settings.

Read from ``POSTGRES_*`` variables and turned into the asyncpg URL used
by the SQLAlchemy engine.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from training_backend.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Connection and pool settings for the scheduling database."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost")
    port: int = Field(default=5432, ge=1, le=65535)
    user: str = Field(default="postgres")
    password: SecretStr = Field(default=SecretStr("postgres"))
    db: str = Field(default="training", description="Database name")

    pool_size: int = Field(default=10, ge=1, description="Persistent pooled connections")
    max_overflow: int = Field(default=20, ge=0, description="Extra connections above pool_size")
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")

    sslmode: Literal["disable", "prefer", "require"] = Field(
        default="prefer",
        description="Only 'require' is forwarded to asyncpg; other modes use its default",
    )

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the asyncpg driver."""
        url = (
            f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.db}"
        )
        if self.sslmode == "require":
            url += "?ssl=require"
        return url
