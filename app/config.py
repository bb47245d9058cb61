# app/config.py

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Catalog Import API"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Supabase (catalog store)
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None

    # Anthropic (Claude) - only required for the AI import path
    anthropic_api_key: Optional[str] = None
    ai_model: str = "claude-sonnet-4-20250514"
    ai_batch_size: int = 50
    ai_batch_timeout_seconds: float = 60.0
    ai_import_deadline_seconds: float = 300.0
    ai_max_tokens: int = 8000

    # Import config
    default_margin_pct: float = 0.0
    price_only_default_stock: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
