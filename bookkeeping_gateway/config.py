"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream bookkeeping API
    bookkeeping_api_base: str = "http://localhost:5000/api"

    # Service
    service_name: str = "bookkeeping-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Display
    currency_symbol: str = "Ksh"

    # Dashboard aggregation
    recent_payments_customers: int = 3  # customers sampled for recent payments
    dashboard_list_limit: int = 5


settings = Settings()
