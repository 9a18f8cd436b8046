"""
Query Cache

Fetched data keyed by query key, with:
- Staleness: entries older than their stale time are refetched on read
- LRU eviction beyond a fixed capacity
- Per-key request tokens: a response is stored only if it belongs to the
  latest request started for its key

Because results are stored under the key that produced them, a late
response for an old filter combination can never overwrite the data of the
current one.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

from ..config.settings import CacheConfig, get_settings

log = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached query result."""
    key: Hashable
    data: Any
    fetched_at: float
    stale_time: float

    def is_stale(self, now: float) -> bool:
        return now - self.fetched_at >= self.stale_time


class QueryCache:
    """Keyed cache of query results."""

    def __init__(self, config: CacheConfig = None, clock: Callable[[], float] = time.monotonic):
        self.config = config or get_settings().cache
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry] = OrderedDict()
        self._latest_token: dict[Hashable, int] = {}
        self._next_token = 0

    def get(self, key: Hashable, allow_stale: bool = False) -> Optional[Any]:
        """Cached data for a key, or None if absent (or stale, unless allowed)."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not allow_stale and entry.is_stale(self._clock()):
            return None
        self._entries.move_to_end(key)
        return entry.data

    def fetch(
        self,
        key: Hashable,
        fetcher: Callable[[], Any],
        stale_time: Optional[float] = None,
        force: bool = False
    ) -> Any:
        """Read-through: return fresh cached data or call `fetcher` and store its result."""
        if not force:
            cached = self.get(key)
            if cached is not None:
                log.debug("Cache hit for %r", key)
                return cached

        token = self.begin(key)
        try:
            data = fetcher()
        except Exception:
            if self._latest_token.get(key) == token:
                del self._latest_token[key]
            raise
        self.resolve(key, token, data, stale_time)
        return data

    def begin(self, key: Hashable) -> int:
        """Register a request for `key`; only the latest token for a key may store data."""
        self._next_token += 1
        self._latest_token[key] = self._next_token
        return self._next_token

    def resolve(
        self,
        key: Hashable,
        token: int,
        data: Any,
        stale_time: Optional[float] = None
    ) -> bool:
        """Store a response if its request is still the latest for the key."""
        if self._latest_token.get(key) != token:
            log.debug("Discarding superseded response for %r", key)
            return False
        self._latest_token.pop(key, None)
        self.set(key, data, stale_time)
        return True

    def set(self, key: Hashable, data: Any, stale_time: Optional[float] = None) -> None:
        if stale_time is None:
            stale_time = self.config.stale_time_seconds
        self._entries[key] = CacheEntry(
            key=key,
            data=data,
            fetched_at=self._clock(),
            stale_time=stale_time
        )
        self._entries.move_to_end(key)

        while len(self._entries) > self.config.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("Evicted %r from query cache", evicted)

    def invalidate(self, prefix: Optional[tuple] = None) -> int:
        """
        Drop entries. With a prefix, only tuple keys starting with it;
        without one, everything. Returns the number of entries dropped.
        """
        if prefix is None:
            dropped = len(self._entries)
            self._entries.clear()
            return dropped

        doomed = [
            key for key in self._entries
            if isinstance(key, tuple) and key[:len(prefix)] == prefix
        ]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()
        self._latest_token.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
