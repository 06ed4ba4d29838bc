"""Configuration management for Request Ledger using Pydantic Settings."""

from functools import lru_cache
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = Field(
        default="development",
        description="Environment (development or production)",
    )

    # Database settings
    database_url: str = Field(
        default="sqlite:///./request_ledger.db",
        description="SQLAlchemy database URL for the history ledger",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL queries to console",
    )

    # Outbound request settings
    request_timeout_ms: int = Field(
        default=10_000,
        gt=0,
        description="Default timeout for proxied requests in milliseconds",
    )

    # History settings
    display_timezone: str = Field(
        default="UTC",
        description="Timezone used for the month/day/year/time fields of a record",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # CORS settings
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:5173"],
        description="Allowed CORS origins for API requests",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed_levels:
            raise ValueError(
                f"Invalid log_level: {v}. Allowed values: {', '.join(sorted(allowed_levels))}"
            )
        return level

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        """Validate the timezone name against the IANA database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Invalid display_timezone: {v}") from e
        return v

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
