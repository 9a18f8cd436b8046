import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from revops_lens.config.settings import ApiConfig, CacheConfig, SearchConfig  # noqa: E402


@pytest.fixture
def api_config():
    return ApiConfig(base_url="http://backend.test", max_retries=0)


@pytest.fixture
def cache_config():
    return CacheConfig(stale_time_seconds=60, max_entries=8)


@pytest.fixture
def search_config():
    return SearchConfig(debounce_ms=300, min_query_length=2)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
