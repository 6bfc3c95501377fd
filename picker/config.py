"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./movies.db"


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Movie Night Picker", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    database_url: str = Field(default=DEFAULT_DATABASE_URL, alias="DATABASE_URL")
    database_path: Path | None = Field(default=None, alias="DATABASE_PATH")

    catalog_path: Path | None = Field(default=None, alias="CATALOG_PATH")
    selection_size: int = Field(default=6, alias="SELECTION_SIZE", ge=1, le=50)
    voter_count: int = Field(default=2, alias="VOTER_COUNT", ge=1, le=12)

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("catalog_path", "database_path", mode="before")
    @classmethod
    def _strip_blank_path(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _resolve_database_path(self) -> "Settings":
        """Let ``DATABASE_PATH`` name the SQLite file when no URL is given."""

        if self.database_path is None:
            return self
        if "database_url" in self.model_fields_set:
            raise ValueError("Configure either DATABASE_URL or DATABASE_PATH, not both")
        self.database_url = f"sqlite+aiosqlite:///{self.database_path}"
        return self

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
