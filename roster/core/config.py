"""Application configuration via environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Roster"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"  # Bind to all interfaces for external access
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./roster.db"
    store_timeout_seconds: float = 15.0  # Busy timeout for every store call

    # List generation schedule (daily, wall clock)
    timezone: str = "Europe/Warsaw"
    generate_hour: int = 1
    generate_minute: int = 0
    misfire_grace_seconds: int = 3600

    # Ranking
    default_generate_list_days_before: int = 2
    tie_break: Literal["registered_at", "shuffle"] = "registered_at"

    # Sign-up
    allowed_email_domain: str = ""  # e.g. "example.com"; empty accepts everyone


settings = Settings()
