"""Configuration management for Inbox Search.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INBOX_SEARCH_ prefix (e.g., INBOX_SEARCH_PAGE_SIZE).
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOX_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gmail Configuration
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to Gmail API credentials file",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to Gmail API token file",
    )
    gmail_max_results: int = Field(
        default=200,
        description="Maximum number of threads to fetch per refresh",
    )
    gmail_scope: str = Field(
        default="https://www.googleapis.com/auth/gmail.modify",
        description=(
            "OAuth scope used for Gmail access. Read/unread write-through and "
            "archiving need gmail.modify; gmail.readonly is enough for search only."
        ),
    )

    # Thread source
    thread_source: str = Field(
        default="gmail",
        description="Where threads come from: 'gmail' or a path to a JSON thread snapshot",
    )
    owner_id: str = Field(
        default="me",
        description="Mailbox owner passed to the thread store",
    )

    # Inbox behaviour
    page_size: int = Field(
        default=20,
        ge=1,
        description="Number of threads per result page",
    )
    poll_interval_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Interval between background refreshes of the thread list",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    max_retries: int = Field(
        default=3,
        description="Maximum number of retries for failed thread fetches",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
