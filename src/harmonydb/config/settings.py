"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = "sqlite+aiosqlite:///./harmonydb.db"
    echo: bool = False
    pool_pre_ping: bool = True
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    # Hey future me - production schemas come from alembic! This flag only exists so tests and
    # throwaway dev databases get their tables without running migrations first.
    create_tables_on_startup: bool = False


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    json_format: bool = False


class Settings(BaseSettings):
    """Top-level application settings.

    Nested sections are set with a double underscore, e.g.
    ``HARMONYDB_DATABASE__URL=postgresql+asyncpg://...``.
    """

    model_config = SettingsConfigDict(
        env_prefix="HARMONYDB_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "harmonydb"
    debug: bool = False
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Yo, settings are read ONCE per process. Tests that need other values build their own
# Settings(...) and hand it to create_app() instead of poking the cache.
@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
