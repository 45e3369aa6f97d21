"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables
    2. .env file (for local development)
    3. Default values

    For local development, copy .env.example to .env and fill in your values.
    For production, set environment variables directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "Record Timeline API"
    debug: bool = False

    # =========================================================================
    # Database
    # =========================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./record_timeline.db",
        description="Async SQLAlchemy connection URL (postgresql+asyncpg://... in production)",
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = ["http://localhost:3000"]

    # =========================================================================
    # API Settings
    # =========================================================================
    api_v1_prefix: str = "/api/v1"

    # Page size used by the timeline and the history report when the
    # caller does not pass one; requests above max_page_size are rejected.
    default_page_size: int = 50
    max_page_size: int = 200

    # =========================================================================
    # Configuration access
    # =========================================================================
    # The user is read from a trusted header set by the fronting proxy.
    user_header: str = "X-Timeline-User"
    config_admin_users: list[str] = Field(
        default_factory=list,
        description="Users allowed to add or remove timeline child configurations",
    )
    allow_anonymous_config: bool = Field(
        default=False,
        description="Grant configuration access when no user header is present (local dev)",
    )

    # =========================================================================
    # Client
    # =========================================================================
    api_base_url: str = Field(
        default="http://localhost:8000/api/v1",
        description="Base URL used by the timeline_ui client and the CLI",
    )
    request_timeout: float = 30.0


settings = Settings()
