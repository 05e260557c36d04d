"""Configuration for promdash (environment variables and .env files)."""

from promdash.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
