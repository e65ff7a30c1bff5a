# src/pricescout/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "PriceScout API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Persistence: "memory" or "sqlite"
    storage_backend: str = "sqlite"
    database_url: str = "sqlite+aiosqlite:///./pricescout.db"

    # Cache & history
    cache_ttl_seconds: int = 30 * 60
    search_history_limit: int = 10
    analytics_max_entries: int = 1000

    # Simulated network latency for the external fallback stage
    simulated_delay_min_ms: int = 1200
    simulated_delay_max_ms: int = 2000

    # External price API (None = stub source, always falls back to the generator)
    external_price_api_url: str | None = None
    external_price_api_timeout_seconds: float = 10.0

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def rate_limit(self) -> str:
        return f"{self.rate_limit_requests}/{self.rate_limit_window_seconds} seconds"


@lru_cache
def get_settings() -> Settings:
    return Settings()
