"""Configuration management."""

from .settings import BuilderSettings, HttpcaseSettings, LoggingSettings, get_settings, reset_settings

__all__ = ["BuilderSettings", "HttpcaseSettings", "LoggingSettings", "get_settings", "reset_settings"]
