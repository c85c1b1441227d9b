"""Runtime configuration helpers.

Classes:
    Settings: Pydantic settings model capturing environment-driven defaults.

Functions:
    get_settings(): Return a cached Settings instance for dependency injection.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Movie Matching API"
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///./data/moviecore.db"
    embedding_dim: int = Field(default=64, ge=1)
    poster_cache_dir: str = "./data/poster-cache"
    poster_cache_max_entries: int = Field(default=500, ge=1)
    tmdb_api_key: SecretStr | None = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p/w500"
    http_timeout_seconds: float = 15.0
    prefetch_on_startup: bool = True
    prefetch_max_pages: int = Field(default=50, ge=1)
    prefetch_cooldown_days: float = 7.0
    recommend_default_limit: int = 4
    autocomplete_default_limit: int = 12
    search_remote_threshold: int = 4


@lru_cache()
def get_settings() -> Settings:
    return Settings()
