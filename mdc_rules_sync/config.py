"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from mdc_rules_sync.utils.constants import DEFAULT_FETCH_CONCURRENCY, DEFAULT_GITHUB_API_URL, DEFAULT_REPOSITORY


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL

    # Rules sync settings
    MDC_RULES_REPOSITORY: str = DEFAULT_REPOSITORY
    MDC_RULES_PREFERENCES_PATH: Path | None = None
    MDC_RULES_FETCH_CONCURRENCY: int = DEFAULT_FETCH_CONCURRENCY
    MDC_RULES_MAX_TOKEN_ATTEMPTS: int | None = None


settings = Settings()
