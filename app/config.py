"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when required credentials or connection strings are absent."""


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="StreamShelf", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=5000, alias="PORT")

    database_url: str | None = Field(default=None, alias="DATABASE_URL")

    omdb_api_key: str | None = Field(default=None, alias="OMDB_API_KEY")
    omdb_api_url: HttpUrl = Field(
        default="http://www.omdbapi.com/", alias="OMDB_API_URL"
    )

    import_delay_seconds: float = Field(
        default=0.1, alias="IMPORT_DELAY_SECONDS", ge=0, le=60
    )
    trending_limit: int = Field(default=5, alias="TRENDING_LIMIT", ge=1, le=50)

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("database_url", "omdb_api_key", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        """Treat blank credentials the same as missing ones."""

        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    def missing_credentials(self) -> list[str]:
        """Return the environment names of required settings that are unset."""

        missing: list[str] = []
        if not self.database_url:
            missing.append("DATABASE_URL")
        if not self.omdb_api_key:
            missing.append("OMDB_API_KEY")
        return missing

    def require_credentials(self) -> None:
        """Raise ``ConfigurationError`` unless the store and provider are configured."""

        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} must be set in the environment or .env file"
            )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
