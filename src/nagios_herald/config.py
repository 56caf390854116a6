"""Configuration management service with Pydantic Settings.

This module provides centralized configuration management for Nagios
Herald, loading and validating environment variables at startup. All
settings use the ``HERALD_`` prefix so they never collide with the
``NAGIOS_*`` macros exported for a notification.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SmtpSettings(BaseSettings):
    """SMTP relay settings."""

    model_config = SettingsConfigDict(env_prefix="HERALD_SMTP_")

    host: str = Field(
        default="localhost",
        alias="HERALD_SMTP_HOST",
        description="SMTP relay host",
    )
    port: int = Field(
        default=25,
        alias="HERALD_SMTP_PORT",
        description="SMTP relay port",
        ge=1,
        le=65535,
    )
    timeout: float = Field(
        default=10.0,
        alias="HERALD_SMTP_TIMEOUT",
        description="SMTP connection timeout in seconds",
        gt=0,
    )


class GangliaSettings(BaseSettings):
    """Ganglia graph settings."""

    model_config = SettingsConfigDict(env_prefix="HERALD_")

    url: str | None = Field(
        default=None,
        alias="HERALD_GANGLIA_URL",
        description="Ganglia web host and optional path, e.g. ganglia.example.com",
    )
    chef_search_url: str | None = Field(
        default=None,
        alias="HERALD_CHEF_SEARCH_URL",
        description="Chef server API URL used to resolve Ganglia clusters",
    )
    http_timeout: float = Field(
        default=10.0,
        alias="HERALD_HTTP_TIMEOUT",
        description="Timeout in seconds for graph and inventory requests",
        gt=0,
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Strip any scheme and trailing slash from the Ganglia host."""
        if v is None:
            return v
        for scheme in ("http://", "https://"):
            if v.startswith(scheme):
                v = v[len(scheme) :]
        return v.rstrip("/")

    @field_validator("chef_search_url")
    @classmethod
    def validate_chef_url(cls, v: str | None) -> str | None:
        """Validate Chef URL format."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("Chef search URL must be an HTTP(S) endpoint")
        return v

    @property
    def enabled(self) -> bool:
        """Check if Ganglia graphs can be fetched."""
        return self.url is not None and self.chef_search_url is not None


class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.

    Example:
        ```python
        from nagios_herald.config import get_settings

        settings = get_settings()
        print(settings.smtp.host)
        print(settings.log_level)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nested configuration groups
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    ganglia: GangliaSettings = Field(default_factory=GangliaSettings)

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="HERALD_LOG_LEVEL",
        description="Logging level",
    )
    dry_run: bool = Field(
        default=False,
        alias="HERALD_DRY_RUN",
        description="Print messages instead of sending them",
    )
    nagios_url: str = Field(
        default="http://localhost",
        alias="HERALD_NAGIOS_URL",
        description="Base URL of the Nagios web UI, used in acknowledge links",
    )
    reply_to: str = Field(
        default="nagios@localhost",
        alias="HERALD_REPLY_TO",
        description="From / Reply-To address of sent messages",
    )
    recipient_domain: str | None = Field(
        default=None,
        alias="HERALD_RECIPIENT_DOMAIN",
        description="Domain appended to bare recipient names in mailto links",
    )

    @field_validator("nagios_url")
    @classmethod
    def validate_nagios_url(cls, v: str) -> str:
        """Validate Nagios URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("HERALD_NAGIOS_URL must be an HTTP(S) URL")
        return v.rstrip("/")

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of settings for display.

        Returns:
            Dictionary of settings as strings.
        """
        return {
            "nagios_url": self.nagios_url,
            "reply_to": self.reply_to,
            "recipient_domain": self.recipient_domain or "(not set)",
            "smtp": {
                "host": self.smtp.host,
                "port": str(self.smtp.port),
                "timeout": str(self.smtp.timeout),
            },
            "ganglia": {
                "url": self.ganglia.url or "(not set)",
                "chef_search_url": self.ganglia.chef_search_url or "(not set)",
            },
            "ganglia_enabled": str(self.ganglia.enabled),
            "log_level": self.log_level,
            "dry_run": str(self.dry_run),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Uses LRU cache to ensure settings are loaded only once and
    reused across the application.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
