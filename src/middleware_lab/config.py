"""Application settings loaded from ``LAB_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_name: str = "Middleware Lab"
    app_version: str = "1.0.0"
    server_name: str = "Middleware-Lab-Demo"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=3333, ge=1, le=65535)

    # Signing key for the session cookie and signed cookies
    secret_key: str = "change-me-in-production"
    session_cookie: str = "lab_session"
    session_max_age: int = Field(default=14 * 24 * 60 * 60, ge=60)

    # CORS - comma-separated list of allowed origins
    cors_allowed_origins: str = (
        "http://localhost:3000,http://localhost:3001,https://yourdomain.com"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
