import logging
import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Configuration for the SQLite backend and its connection pool."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="DATABASE_", extra="ignore"
    )

    path: str = Field("docstore.db", description="Path to the SQLite database file")
    pool_size: int = Field(5, ge=1, description="Maximum number of pooled connections")
    pool_timeout: Optional[float] = Field(
        None, gt=0, description="Seconds to wait for a free connection; unset waits forever"
    )
    busy_timeout: float = Field(30.0, gt=0, description="Seconds SQLite waits on a locked database")


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    debug: bool = Field(False, description="Enable debug mode for development")
    log_level: str = Field("INFO", description="Logging level")
    collections: List[str] = Field(
        default_factory=list, description="Collection names registered at startup"
    )

    db: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @property
    def log_level_value(self) -> int:
        """Return the numeric value of the log level."""
        return logging.getLevelName(self.log_level.upper())


@lru_cache
def get_settings() -> AppSettings:
    """
    Get application settings.
    If the TEST_MODE environment variable is set, it returns a configuration
    backed by an in-memory database, otherwise loads it from the environment
    and the .env file.
    """
    if os.getenv("TEST_MODE"):
        return AppSettings(
            debug=True,
            log_level="DEBUG",
            db=DatabaseSettings(path=":memory:"),
        )
    return AppSettings()
