"""Environment-based configuration using pydantic-settings.

Provides defaults for the build phase (documentation, verb set), the logging
setup, and the executor used when a client class names none.

Example:
    >>> from httpcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.builder.docs
    True

    # Or with environment variables:
    # HTTPCASE_BUILDER_DOCS=false
    # HTTPCASE_LOG_LEVEL=DEBUG
    # HTTPCASE_EXECUTOR=myproject.http:execute
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, ImportString
from pydantic_settings import BaseSettings, SettingsConfigDict


class BuilderSettings(BaseSettings):
    """Defaults applied when a client class leaves generation options unset."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPCASE_BUILDER_",
        extra="ignore",
    )

    docs: bool = Field(default=True, description="Attach usage text to generated entry points")
    verbs: str | None = Field(
        default=None,
        description="Comma separated verbs generated by default (None = all eight)",
    )

    @property
    def verb_names(self) -> tuple[str, ...] | None:
        """Default verb names, lowercased, or None when unset."""
        if self.verbs is None:
            return None
        return tuple(part.strip().lower() for part in self.verbs.split(",") if part.strip())


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"


class HttpcaseSettings(BaseSettings):
    """Root settings for httpcase.

    Loads configuration from environment variables with HTTPCASE_ prefix.

    Example environment variables:
        HTTPCASE_DEBUG=true
        HTTPCASE_EXECUTOR=myproject.http:execute
        HTTPCASE_BUILDER_DOCS=false
        HTTPCASE_BUILDER_VERBS=get,post
        HTTPCASE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTPCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    executor: ImportString[Any] | None = Field(
        default=None,
        description="Import path of the executor used by client classes that name none",
    )

    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> HttpcaseSettings:
    """Get the global settings instance (cached)."""
    return HttpcaseSettings()


def reset_settings() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
