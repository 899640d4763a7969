"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./htd_notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str | None = Field(
        default="UTC",
        description="Timezone used to store and compare notification timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    client_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL prepended to notification deep links",
    )
    brand_name: str = Field(
        default="HTD",
        description="Brand shown in SMS prefixes and email signatures",
        min_length=1,
    )

    email_backend: Literal["smtp", "sendgrid"] = Field(
        default="smtp",
        description="Transport used to deliver email notifications",
    )
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port", gt=0)
    smtp_secure: bool = Field(
        default=False,
        description="Open an implicit TLS connection instead of upgrading with STARTTLS",
    )
    smtp_user: str | None = Field(default=None, description="SMTP login user")
    smtp_pass: str | None = Field(default=None, description="SMTP login password")
    smtp_from: str = Field(
        default="noreply@htd-system.com",
        description="Email address that will appear as the sender of notifications",
    )
    smtp_timeout_seconds: float = Field(
        default=30.0, description="Socket timeout for SMTP connections", gt=0
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used when EMAIL_BACKEND is 'sendgrid'",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Sender address used for messages delivered through SendGrid",
        min_length=3,
    )

    twilio_account_sid: str | None = Field(
        default=None, description="Twilio account identifier"
    )
    twilio_auth_token: str | None = Field(default=None, description="Twilio auth secret")
    twilio_phone_number: str | None = Field(
        default=None, description="Phone number SMS messages are sent from"
    )

    notification_sweep_enabled: bool = Field(
        default=True,
        description="Run the background sweep that sends due notifications",
    )
    notification_sweep_interval_seconds: int = Field(
        default=60,
        description="Seconds between two sweeps for due notifications",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable SendGrid"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        if self.email_backend == "sendgrid" and not self.sendgrid_api_key:
            raise ValueError("EMAIL_BACKEND=sendgrid requires SENDGRID_API_KEY")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
