"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (placeholders are for local dev only)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Domain limits (pin cap, todo cap) live here so tests can shrink them
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://plub:plub@db:5432/plub"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # JWT (durations in seconds)
    jwt_secret_key: str = "plub-local-dev-jwt-secret-key-change-me"
    jwt_algorithm: str = "HS256"
    jwt_access_duration: int = 60 * 60
    jwt_refresh_duration: int = 60 * 60 * 24 * 14
    jwt_sign_duration: int = 60 * 5

    # Fernet key used to encrypt the token subject (email)
    encryption_key: str = "cGx1Yi1sb2NhbC1kZXYtZW5jcnlwdGlvbi1rZXkhISE="

    # Social providers
    kakao_admin_key: str = "kakao-admin-placeholder"
    apple_client_id: str = "plub.plubserver"
    apple_client_secret: str = "apple-client-secret-placeholder"
    social_timeout_seconds: int = 10

    # Push gateway (empty URL = log only)
    push_gateway_url: str = ""
    push_server_key: str = "push-key-placeholder"
    push_max_retries: int = 3
    push_base_delay_ms: int = 500
    push_max_delay_ms: int = 8_000

    # Domain limits
    max_pinned_feeds: int = 20
    max_todos_per_timeline: int = 5
    default_page_size: int = 10

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
