"""Configuration management using pydantic-settings."""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # PokeAPI configuration
    pokeapi_base_url: str = "https://pokeapi.co/api/v2"
    http_timeout_seconds: float = 10.0

    # Outbound request limits
    max_concurrent_requests: int = 10
    retry_attempts: int = 3
    retry_backoff_seconds: float = 0.5

    # Search tuning
    name_pool_size: int = 1000
    candidate_limit: int = 20
    recent_search_limit: int = 10
    search_debounce_seconds: float = 0.3

    # Optional cap on concurrent fetch workers (None = one per candidate)
    fetch_max_workers: Optional[int] = None

    # Cache settings
    cache_enabled: bool = True
    record_cache_size: int = 2000

    # Recent searches persistence
    database_url: str = "sqlite:///./dexsearch.db"

    # Notable-query log (SEARCH_LOGGING=1)
    search_logging: bool = False
    log_directory: Path = Path("./logs")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
