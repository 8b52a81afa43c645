# src/coinclock/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a .env file and are validated
at startup.

Files that USE this module:
- coinclock.app (builds every component from settings)
- coinclock.adapters.upstream.fetcher (default base URL, timeout and retry policy)
- coinclock.adapters.persistence.coin_repository (default seed file path)

Files that this module USES:
- coinclock.shared.validators (validation functions for settings)
- coinclock.domain.models (RetryPolicy built from the retry fields)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from datetime import date, timedelta
from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator, model_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from coinclock.domain.models import RetryPolicy
from coinclock.shared.validators import (
    normalize_base_url,  # Strip trailing slashes from URLs
    validate_base_url,  # Validate http(s) URL format
    validate_port,  # Validate TCP port range
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Upstream price source ---
    upstream_base_url: str = Field(default="http://localhost:8081", alias="UPSTREAM_BASE_URL")
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Virtual clock ---
    initial_simulated_date: date = Field(default=date(2014, 1, 1), alias="INITIAL_SIMULATED_DATE")
    day_duration_seconds: float = Field(default=60.0, alias="DAY_DURATION_SECONDS", ge=0.01)

    # --- Retry policy (defaults: fixed 1s delay, no attempt limit) ---
    retry_delay_seconds: float = Field(default=1.0, alias="RETRY_DELAY_SECONDS", ge=0.0)
    retry_backoff_factor: float = Field(default=1.0, alias="RETRY_BACKOFF_FACTOR", ge=1.0)
    retry_max_delay_seconds: float = Field(default=60.0, alias="RETRY_MAX_DELAY_SECONDS", ge=0.0)
    retry_max_attempts: Optional[int] = Field(default=None, alias="RETRY_MAX_ATTEMPTS", ge=1)

    # --- Persistence ---
    coins_file: Path = Field(default=Path("./data/coins.json"), alias="COINS_FILE")

    # --- HTTP server ---
    listen_host: str = Field(default="127.0.0.1", alias="LISTEN_HOST")
    listen_port: int = Field(default=8080, alias="LISTEN_PORT")

    # --- Logging (for server deployment) ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="COINCLOCK_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def day_duration(self) -> timedelta:
        """Real-time interval representing one simulated day."""
        return timedelta(seconds=self.day_duration_seconds)

    @property
    def retry_policy(self) -> RetryPolicy:
        """Retry policy for upstream fetches."""
        return RetryPolicy(
            delay_seconds=self.retry_delay_seconds,
            backoff_factor=self.retry_backoff_factor,
            max_delay_seconds=self.retry_max_delay_seconds,
            max_attempts=self.retry_max_attempts,
        )

    @field_validator("upstream_base_url")
    @classmethod
    def validate_upstream_base_url(cls, v: str) -> str:
        """Validate and normalize the upstream URL."""
        v = normalize_base_url(v)
        if not validate_base_url(v):
            raise ValueError("UPSTREAM_BASE_URL must be an absolute http(s) URL")
        return v

    @field_validator("listen_port")
    @classmethod
    def validate_listen_port(cls, v: int) -> int:
        if not validate_port(v):
            raise ValueError("LISTEN_PORT must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v

    @model_validator(mode="after")
    def validate_retry_bounds(self) -> Settings:
        """The delay cap cannot be smaller than the first delay."""
        if self.retry_max_delay_seconds < self.retry_delay_seconds:
            raise ValueError("RETRY_MAX_DELAY_SECONDS must be >= RETRY_DELAY_SECONDS")
        return self


# Global settings instance
settings = Settings()


# ============================================================================
# Deployment Instructions
# ============================================================================
#
# 1. Point the server at an upstream that answers GET /coins/{epochMillis}:
#    export UPSTREAM_BASE_URL=http://prices.internal:8081
#
# 2. Run it (one simulated day per minute by default):
#    coinclock
#
#    Or in the background with logging:
#    nohup coinclock > coinclock.log 2>&1 &
#
# 3. Query it:
#    curl http://127.0.0.1:8080/coins/bitcoin
#    curl http://127.0.0.1:8080/clock
#
# 4. Stop it (SIGINT/SIGTERM stop the refresh daemon cleanly):
#    pkill -f coinclock
#
# ============================================================================
