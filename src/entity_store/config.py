"""Configuration management for entity-store."""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATABASE_NAME = "entity-store.db"
DEFAULT_API_PREFIX = "/v1"


class StoreConfig(BaseSettings):
    """Settings for a running entity store.

    Values come from the environment (``ENTITY_STORE_*``) or a ``.env`` file.
    The database URL is also read from a plain ``DATABASE_URL``.
    """

    home: Path = Field(
        default_factory=lambda: Path.home() / ".entity-store",
        description="Base path for entity-store data and logs",
    )

    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ENTITY_STORE_DATABASE_URL", "DATABASE_URL"),
        description="SQLAlchemy async URL, defaults to a SQLite file in home",
    )

    log_level: str = Field(default="INFO", description="Minimum log level")
    log_file: Optional[str] = Field(
        default=None, description="Log file name, relative to home. Disabled when unset"
    )

    api_prefix: str = Field(default=DEFAULT_API_PREFIX, description="Prefix for all API routes")

    model_config = SettingsConfigDict(
        env_prefix="ENTITY_STORE_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    @property
    def database_path(self) -> Path:
        """Get the default SQLite database path."""
        return self.home / DATABASE_NAME

    @property
    def resolved_database_url(self) -> str:
        """Database URL to connect to, falling back to the SQLite file in home."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.database_path}"

    @property
    def log_path(self) -> Optional[Path]:
        if not self.log_file:
            return None
        return self.home / self.log_file

    @field_validator("home")
    @classmethod
    def ensure_path_exists(cls, v: Path) -> Path:
        """Ensure home path exists."""
        if not v.exists():
            v.mkdir(parents=True)
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()
