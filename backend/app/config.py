"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Cache disabled by default ("none"): the feed is correct without it
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://sleep:sleep@db:5432/sleep_tracker"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Cache
    cache_backend: Literal["none", "memory", "redis"] = "none"
    redis_url: str = "redis://localhost:6379/0"
    cache_key_prefix: str = "sleep_tracker"
    followees_cache_ttl_seconds: int = 3600
    records_cache_ttl_seconds: int = 300

    # Feed defaults (bounds are fixed in core/domain_types.py)
    feed_default_days: int = 7
    feed_default_limit: int = 20

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"
    enable_request_logging: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
