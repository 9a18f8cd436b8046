"""
Debounced Global Search

Keystrokes are collapsed into one request per pause in typing, and only
the newest request's results are ever applied:
- Debouncer: a single cancellable timer slot
- LatestRequestGate: monotonically increasing tokens; a result is applied
  only if its token is still the latest one issued
- GlobalSearch: the two combined for the navigation search box
"""

import logging
import threading
from typing import Any, Callable

from ..config.settings import SearchConfig, get_settings

log = logging.getLogger(__name__)


class LatestRequestGate:
    """Last-write-wins guard for asynchronous results."""

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = 0

    def issue(self) -> int:
        """Start a new request; every earlier token becomes stale."""
        with self._lock:
            self._latest += 1
            return self._latest

    def invalidate(self) -> None:
        """Make every outstanding token stale without starting a request."""
        self.issue()

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    def apply(self, token: int, result: Any, sink: Callable[[Any], None]) -> bool:
        """Hand `result` to `sink` only if `token` is still current."""
        if not self.is_current(token):
            log.debug("Dropping result of superseded request %d", token)
            return False
        sink(result)
        return True


class Debouncer:
    """
    Runs the most recently submitted call once no new call has arrived for
    `delay_ms`. The timer factory must return an object with start() and
    cancel(), the way threading.Timer does.
    """

    def __init__(self, delay_ms: int, timer_factory: Callable = threading.Timer):
        self.delay_ms = delay_ms
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0

    def submit(self, fn: Callable, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = self._timer_factory(
                self.delay_ms / 1000.0,
                self._fire,
                (self._generation, fn, args, kwargs),
                {}
            )
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, generation: int, fn: Callable, args: tuple, kwargs: dict) -> None:
        with self._lock:
            # A timer that lost a cancel race must not run
            if generation != self._generation:
                return
            self._timer = None
        fn(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._timer is not None


class GlobalSearch:
    """
    Navigation search box.

    `fetch(query)` performs the request; `on_results(results)` receives
    results only while no later keystroke has arrived. Queries shorter
    than the minimum length clear the results immediately.
    """

    def __init__(
        self,
        fetch: Callable[[str], Any],
        on_results: Callable[[Any], None],
        config: SearchConfig = None,
        timer_factory: Callable = threading.Timer
    ):
        self.config = config or get_settings().search
        self._fetch = fetch
        self._on_results = on_results
        self._gate = LatestRequestGate()
        self._debouncer = Debouncer(self.config.debounce_ms, timer_factory)
        self.query = ""

    def type(self, query: str) -> None:
        """Register a keystroke; the search fires after the debounce delay."""
        self.query = query or ""
        if len(self.query.strip()) < self.config.min_query_length:
            self._debouncer.cancel()
            self._gate.invalidate()
            self._on_results([])
            return
        token = self._gate.issue()
        self._debouncer.submit(self._run, self.query.strip(), token)

    def cancel(self) -> None:
        self._debouncer.cancel()
        self._gate.invalidate()

    def _run(self, query: str, token: int) -> None:
        try:
            results = self._fetch(query)
        except Exception as e:
            log.warning("Search for %r failed: %s", query, e)
            self._gate.apply(token, [], self._on_results)
            return
        self._gate.apply(token, results, self._on_results)
