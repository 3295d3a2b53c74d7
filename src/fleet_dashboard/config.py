"""Runtime configuration for fleet dashboard service."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    service_name: str = "fleet-dashboard-service"
    service_version: str = "0.1.0"
    log_level: str = "INFO"
    metrics_enabled: bool = True

    # Length of every ranked shortlist on the dashboard.
    shortlist_size: int = 3

    model_config = SettingsConfigDict(env_prefix="FLEET_DASHBOARD_", extra="ignore")


def get_settings() -> Settings:
    """Return settings object."""

    return Settings()
