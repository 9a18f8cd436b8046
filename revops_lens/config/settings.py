"""
Settings Management with Pydantic

Provides type-safe configuration management with:
- Environment variable support
- Validation
- One configuration block per concern (API, cache, search, list views)
"""

from typing import Optional
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiConfig(BaseSettings):
    """REST backend configuration."""
    model_config = SettingsConfigDict(
        env_prefix="REVOPS_API_",
        extra="ignore"
    )

    base_url: str = "http://localhost:3001"
    timeout_seconds: float = 30.0
    verify_ssl: bool = True

    # Bounded retry for idempotent GETs
    max_retries: int = 2
    retry_backoff_factor: float = 0.5
    retry_statuses: list[int] = Field(default_factory=lambda: [502, 503, 504])

    # Session cookie issued by the backend login flow
    session_cookie_name: str = "connect.sid"
    session_cookie: Optional[SecretStr] = None


class CacheConfig(BaseSettings):
    """Query cache configuration."""
    model_config = SettingsConfigDict(
        env_prefix="REVOPS_CACHE_",
        extra="ignore"
    )

    stale_time_seconds: float = 1800.0  # 30 minutes
    max_entries: int = 256


class SearchConfig(BaseSettings):
    """Global search configuration."""
    model_config = SettingsConfigDict(
        env_prefix="REVOPS_SEARCH_",
        extra="ignore"
    )

    debounce_ms: int = 300
    min_query_length: int = 2


class ListViewConfig(BaseSettings):
    """Defaults for the account and opportunity list views."""
    model_config = SettingsConfigDict(
        env_prefix="REVOPS_LIST_",
        extra="ignore"
    )

    default_sort_direction: str = "DESC"
    account_default_sort: str = "LastModifiedDate"
    opportunity_default_sort: str = "CloseDate"

    # Salesforce caps a single query at 2000 rows
    max_query_limit: int = 2000


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "RevOps Lens"
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    api: ApiConfig = Field(default_factory=ApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    lists: ListViewConfig = Field(default_factory=ListViewConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            api=ApiConfig(),
            cache=CacheConfig(),
            search=SearchConfig(),
            lists=ListViewConfig()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
