"""Configuration management for markdown-spans."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Bundled images
    resource_dir: Optional[Path] = Field(
        default=None,
        alias="MARKDOWN_SPANS_RESOURCE_DIR",
    )

    # Remote image fetching
    fetch_timeout: float = Field(
        default=10.0,
        alias="MARKDOWN_SPANS_FETCH_TIMEOUT",
    )
    fetch_workers: int = Field(
        default=4,
        alias="MARKDOWN_SPANS_FETCH_WORKERS",
    )
    max_retries: int = Field(
        default=3,
        alias="MARKDOWN_SPANS_MAX_RETRIES",
    )
    retry_backoff: float = Field(
        default=1.0,
        alias="MARKDOWN_SPANS_RETRY_BACKOFF",
    )
    user_agent: str = Field(
        default="markdown-spans/0.1",
        alias="MARKDOWN_SPANS_USER_AGENT",
    )

    # Resolved images wider than this are scaled down
    max_image_width: Optional[int] = Field(
        default=None,
        alias="MARKDOWN_SPANS_MAX_IMAGE_WIDTH",
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
