"""
Configuration Management

Centralized configuration for:
- The REST backend (base URL, timeout, retry)
- Query caching
- Debounced global search
- List view defaults
"""

from .settings import (
    Settings,
    ApiConfig,
    CacheConfig,
    SearchConfig,
    ListViewConfig,
    get_settings
)
from .providers import (
    HttpSessionProvider,
    get_session
)

__all__ = [
    "Settings",
    "ApiConfig",
    "CacheConfig",
    "SearchConfig",
    "ListViewConfig",
    "get_settings",
    "HttpSessionProvider",
    "get_session"
]
