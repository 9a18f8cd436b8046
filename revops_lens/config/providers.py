"""
HTTP Session Provider

Provides a lazily built, credentials-bearing requests session with:
- Bounded retry with backoff for idempotent GETs
- JSON headers
- The backend session cookie, when configured
"""

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .settings import ApiConfig, get_settings

log = logging.getLogger(__name__)


class HttpSessionProvider:
    """
    Factory for the shared requests session.

    The session is created on first use and reused for every call until
    `close()` is invoked.
    """

    def __init__(self, config: ApiConfig = None):
        self.config = config or get_settings().api
        self._session = None

    def get_session(self) -> requests.Session:
        """Get session instance (lazy initialization)."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def close(self) -> None:
        """Close the session and drop pooled connections."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({"Content-Type": "application/json"})
        session.verify = self.config.verify_ssl

        if self.config.session_cookie is not None:
            session.cookies.set(
                self.config.session_cookie_name,
                self.config.session_cookie.get_secret_value()
            )

        adapter = HTTPAdapter(max_retries=self._create_retry())
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        log.debug(
            "Created HTTP session for %s (retries=%d)",
            self.config.base_url, self.config.max_retries
        )
        return session

    def _create_retry(self) -> Retry:
        """Retry policy: only GET is retried, and only on transient statuses."""
        return Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.retry_backoff_factor,
            status_forcelist=tuple(self.config.retry_statuses),
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False
        )


def get_session(config: ApiConfig = None) -> requests.Session:
    """Convenience function to build a configured session."""
    return HttpSessionProvider(config).get_session()
