"""
Backend access: REST client and keyed query cache.
"""

from .api import ApiClient, ApiError, ApiResponse
from .cache import QueryCache, CacheEntry

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiResponse",
    "QueryCache",
    "CacheEntry"
]
