"""
Application settings using Pydantic.

Reads the same environment variables the Grafana/Prometheus tooling expects
(GRAFANA_URL, GRAFANA_API_KEY, GRAFANA_DEPLOY_ENABLED, ...), optionally from
a local .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Prometheus
    prometheus_url: str | None = None

    # Grafana
    grafana_url: str | None = None
    grafana_api_key: str | None = None
    grafana_deploy_enabled: bool = False
    grafana_org_id: int | None = None

    # HTTP client settings
    http_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json, console

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
