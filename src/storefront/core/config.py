# src/storefront/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.domain.models import Market


class Settings(BaseSettings):
    # App
    app_name: str = "Storefront History API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Keys: mapping from API key to tenant id (JSON string as env var)
    # Format: '{"key_abc123": "tenant_alice", "key_xyz789": "tenant_bob"}'
    api_keys: dict[str, str] = Field(default_factory=dict)

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate limiting per API key (slowapi limit string)
    rate_limit: str = "100/minute"

    # Persistence
    storage_backend: Literal["sqlite", "memory"] = "sqlite"
    database_url: str = "sqlite+aiosqlite:///./storefront.db"
    # Key prefix, must stay stable across releases or stored history is orphaned
    storage_namespace: str = "@thamili"
    protected_storage_suffixes: list[str] = Field(default=["user_data", "cart", "country"])

    # History & recommendations
    recently_viewed_capacity: int = Field(default=20, ge=1)
    search_history_capacity: int = Field(default=10, ge=1)
    default_market: Market = Market.GERMANY

    # Checkout autosave
    autosave_delay_seconds: float = Field(default=1.0, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
