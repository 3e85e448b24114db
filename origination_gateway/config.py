"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage
    store_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///./originations.db"

    # Service
    service_name: str = "origination-gateway"
    log_level: str = "INFO"

    # Card issuance
    card_issuer_prefix: str = "4"  # Visa
    card_validity_years: int = 5


settings = Settings()
