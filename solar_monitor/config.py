"""
API configuration loaded from environment variables.

Uses Pydantic BaseSettings for env var loading and validation. Every value
has a default so the service starts against a local SQLite file with no
environment at all; production deployments set DATABASE_URL to PostgreSQL.

CHANGELOG:
- 2026-10-17: Initial creation

TODO:
- None
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Solar monitor API configuration.

    Attributes:
        database_url: SQLAlchemy async database URL.
        sql_echo: Echo SQL statements to the log.
        redis_url: Redis URL for the snapshot cache. Caching is disabled
            when empty.
        cache_ttl_s: Snapshot cache TTL in seconds.
        max_panels_per_request: Max panel readings accepted per ingest call.
        cors_origins: Comma-separated list of allowed CORS origins.
        log_level: Root log level name.
        environment: Deployment environment label, logged at startup.
    """

    database_url: str = "sqlite+aiosqlite:///./solar.db"
    sql_echo: bool = False
    redis_url: str | None = None
    cache_ttl_s: int = 5
    max_panels_per_request: int = 1000
    cors_origins: str = "*"
    log_level: str = "INFO"
    environment: str = "development"

    @field_validator("database_url")
    @classmethod
    def database_url_must_be_async(cls, v: str) -> str:
        """Rewrite plain PostgreSQL URLs to the asyncpg driver."""
        if not v:
            raise ValueError("DATABASE_URL must not be empty")
        for prefix in ("postgres://", "postgresql://"):
            if v.startswith(prefix):
                return "postgresql+asyncpg://" + v[len(prefix) :]
        return v

    @field_validator("cache_ttl_s")
    @classmethod
    def cache_ttl_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("CACHE_TTL_S must be >= 1")
        return v

    @field_validator("max_panels_per_request")
    @classmethod
    def max_panels_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_PANELS_PER_REQUEST must be >= 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Validate that LOG_LEVEL names a standard logging level."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{v}' is not a valid logging level")
        return level

    @property
    def cors_origin_list(self) -> list[str]:
        """Return CORS origins split on commas, blanks dropped."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()
