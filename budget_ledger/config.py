"""Configuration management using Pydantic Settings"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./finance.db"

    # Transaction feed (external scraper service)
    feed_api_base: str = "http://localhost:8001"
    feed_accounts: List[str] = []

    # Service
    service_name: str = "budget-ledger"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0

    # Categories
    variable_category_name: str = "הוצאות משתנות"
    default_category_color: str = "#6366f1"


settings = Settings()
