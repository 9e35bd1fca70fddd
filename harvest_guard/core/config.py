"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Harvest Guard"
    app_version: str = "0.1.0"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8000
    # Environment source: open-meteo|synthetic
    environment_provider: str = "open-meteo"
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    environment_forecast_days: int = 5
    environment_cache_ttl_seconds: float = 300.0  # 5 minutes
    environment_fetch_timeout: float = 10.0
    synthetic_environment_seed: int | None = None
    default_location: str = "Dhaka"
    # Substituted when no environment reading is available
    neutral_humidity_pct: float = 70.0
    neutral_rain_chance_pct: float = 0.0
    neutral_temperature_c: float = 28.0
    crop_profiles_path: str = "config/crop_profiles.yml"
    etcl_sampling: bool = True
    # Optional generative advisory (disabled when the key is empty)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    gemini_timeout: float = 20.0
    notification_log_size: int = 50
    # Logging and metrics
    log_level: str = "INFO"
    service_name: str = "harvest-guard"
    log_buffer_size: int = 200
    metrics_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

__all__ = ["settings", "Settings"]
