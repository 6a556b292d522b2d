"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transactions.core.isolation import IsolationLevel


VALID_DATABASE_SCHEMES = ["sqlite+aiosqlite", "postgresql+asyncpg"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Credentials embedded in DATABASE_URL belong in the .env file (gitignored).
    """

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/transactions.db",
        description="Async database URL (SQLite for local use, PostgreSQL for production)"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement (debug only)"
    )

    # Connection Pool (ignored for SQLite)
    db_pool_size: int = Field(
        default=5,
        ge=1,
        description="Connections kept open in the pool"
    )
    db_max_overflow: int = Field(
        default=10,
        ge=0,
        description="Extra connections allowed beyond the pool size"
    )
    db_pool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for a free pooled connection"
    )
    db_pool_pre_ping: bool = Field(
        default=True,
        description="Test connections for liveness on checkout"
    )

    # Transactions
    db_lock_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Milliseconds a statement waits for a row/table lock before failing"
    )
    default_isolation_level: IsolationLevel = Field(
        default=IsolationLevel.READ_COMMITTED,
        description="Isolation level for reads when the caller does not pick one"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Emit single-line JSON logs (False for plain text)"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """
        Validate database URL format.

        Only async drivers are accepted since the engine is an AsyncEngine.
        """
        if not v or v.strip() == "":
            raise ValueError("DATABASE_URL is required and cannot be empty")

        if not any(v.startswith(scheme + "://") for scheme in VALID_DATABASE_SCHEMES):
            raise ValueError(
                f"DATABASE_URL must start with one of: {', '.join(VALID_DATABASE_SCHEMES)}. "
                f"Got: {v[:20]}..."
            )

        return v

    @field_validator("default_isolation_level", mode="before")
    @classmethod
    def parse_isolation_level(cls, v):
        """Accept "serializable", "read_committed", "REPEATABLE READ", ..."""
        if isinstance(v, str):
            try:
                return IsolationLevel(v)
            except ValueError:
                raise ValueError(
                    f"DEFAULT_ISOLATION_LEVEL must be one of: "
                    f"{', '.join(level.value for level in IsolationLevel)}. Got: {v}"
                )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to upper case and reject unknown level names."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}. Got: {v}"
            )
        return level

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# Global settings instance
# Import this instance throughout the application
settings = Settings()
