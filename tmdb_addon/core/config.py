"""
Configuration Management
Loads and validates environment variables
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )
    # Public address used in manifest assets and deep links
    BASE_URL: str = "http://localhost:8000"

    # API Keys (server defaults - users may override TMDB per config)
    TMDB_API_KEY: Optional[str] = None
    FANART_API_KEY: Optional[str] = None

    DEFAULT_LANGUAGE: str = "en-US"

    # Cache TTLs (seconds)
    CACHE_TTL_META: int = 3600  # 1 hour
    CACHE_TTL_POSTER_CHECK: int = 600  # 10 minutes
    CACHE_TTL_GENRES: int = 86400  # 24 hours
    CACHE_TTL_CATALOG: int = 3600  # Cache-Control max-age for catalog responses

    # Performance Limits
    MAX_CONCURRENT_API_CALLS: int = 10
    HTTP_TIMEOUT: int = 10

    # API Rate Limits (requests per second)
    TMDB_RATE_LIMIT: int = 40

    # Development
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    DISABLE_RATE_LIMITING: bool = False


settings = Settings()
