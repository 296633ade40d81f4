"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    transaction_api_base: str = "http://localhost:8001"

    # Service
    service_name: str = "cashflow-forecast"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Forecast bounds
    default_horizon_days: int = 90
    max_horizon_days: int = 3650


settings = Settings()
