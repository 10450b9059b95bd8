"""Configuration management with Pydantic settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """tagvec configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TAGVEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Query settings
    default_page_size: int = Field(
        default=10,
        ge=1,
        description="Page size used by query() when none is given",
    )

    # Ingest settings
    batch_size: int = Field(
        default=1000,
        ge=1,
        description="Number of items encoded per chunk in add_item_batch()",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Root log level applied by the CLI",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
