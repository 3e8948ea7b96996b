"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - database_url always names an async driver after validation

Design Decisions:
    - Defaults keep a local SQLite file database working with no environment at all
    - sqlx-style "sqlite:file.db" URLs are accepted for compatibility with existing .env files
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///stellar_insights.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_to_async_driver(cls, v: str) -> str:
        """Rewrite sync driver URLs to their async equivalents."""
        if not isinstance(v, str):
            return v
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if v.startswith("sqlite:"):
            return "sqlite+aiosqlite:///" + v[len("sqlite:"):]
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    run_migrations: bool = True

    # Server
    server_host: str = "127.0.0.1"
    server_port: int = 8080
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
