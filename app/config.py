"""Application configuration using Pydantic Settings."""

from datetime import timedelta
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.helpers import parse_duration


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    APP_NAME: str = "Job Tracker API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False  # Auto-reload for `python -m app.main`
    ENVIRONMENT: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGIN: str = "http://localhost:3000"
    TRUST_PROXY: bool = True

    # MongoDB
    MONGODB_URI: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MONGODB_URI", "MONGO_URI"),
    )
    MONGODB_DATABASE: str = "job_tracker"  # Used when the URI has no default database
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # JWT
    JWT_ACCESS_SECRET: str = Field(
        default="change-this-access-secret",
        validation_alias=AliasChoices("JWT_ACCESS_SECRET", "ACCESS_TOKEN_SECRET", "JWT_SECRET"),
    )
    JWT_REFRESH_SECRET: str = Field(
        default="change-this-refresh-secret",
        validation_alias=AliasChoices("JWT_REFRESH_SECRET", "REFRESH_TOKEN_SECRET"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_TTL: timedelta = timedelta(minutes=15)
    REFRESH_TOKEN_TTL: timedelta = timedelta(days=7)
    AUTH_COOKIE_NAME: str = "token"

    # Google OAuth
    GOOGLE_CLIENT_ID: str = ""

    # Rate limiting (production only)
    RATE_LIMIT_AUTH: str = "1000/15minutes"
    RATE_LIMIT_API: str = "2000/15minutes"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Monitoring
    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    @field_validator("ACCESS_TOKEN_TTL", "REFRESH_TOKEN_TTL", mode="before")
    @classmethod
    def parse_ttl(cls, v: Any) -> Any:
        """Accept '15m' / '7d' style durations as well as plain seconds."""
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def normalize_environment(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins(self) -> List[str]:
        """Parse comma-separated CORS origins."""
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]


# Create global settings instance
settings = Settings()
