"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

EXPO_PUSH_API_URL = "https://exp.host/--/api/v2/push/send"
# Expo rejects requests carrying more than 100 messages.
EXPO_MAX_BATCH_SIZE = 100


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone name or UTC offset used for timestamps",
    )
    log_level: str = Field(default="INFO", description="Level for the application logger")
    cors_origins: str | None = Field(
        default=None,
        description="Comma separated list of origins allowed by the CORS middleware",
    )

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )

    expo_push_url: str = Field(
        default=EXPO_PUSH_API_URL,
        description="Expo push service endpoint receiving message batches",
    )
    expo_access_token: str | None = Field(
        default=None,
        description="Optional Expo access token sent as a bearer credential",
    )
    push_batch_size: int = Field(
        default=EXPO_MAX_BATCH_SIZE,
        description="Messages per push request; bounded by the provider limit",
        ge=1,
        le=EXPO_MAX_BATCH_SIZE,
    )
    push_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every push provider request",
        gt=0,
    )

    password_reset_window_minutes: int = Field(default=15, gt=0)
    password_reset_max_attempts: int = Field(default=3, gt=0)
    password_reset_otp_ttl_minutes: int = Field(default=10, gt=0)
    password_reset_max_verify_attempts: int = Field(default=5, gt=0)
    password_reset_token_expire_minutes: int = Field(default=15, gt=0)

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def allowed_origins(self) -> list[str]:
        """Return CORS origins as a list, parsing the comma separated value."""

        raw = self.cors_origins or ""
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "EXPO_MAX_BATCH_SIZE",
    "EXPO_PUSH_API_URL",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
