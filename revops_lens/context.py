"""
Application Context

The single object the application root constructs at startup and hands to
every view: settings, the REST client, the query cache, and the shared
field-permission cache. Dropping (or closing) it ends the session.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .client.api import ApiClient, ApiError
from .client.cache import QueryCache
from .config.settings import Settings, get_settings
from .core.entities import CurrentUser
from .filters.scope import FALLBACK_SCOPE, OwnershipScope, resolve_default_scope
from .permissions.field_permissions import FieldPermissionCache

log = logging.getLogger(__name__)

CURRENT_USER_KEY = ("currentUser",)
SCOPE_DEFAULTS_KEY = ("scopeDefaults",)


@dataclass
class AppContext:
    """Session-wide collaborators."""
    settings: Settings
    api: ApiClient
    cache: QueryCache
    permissions: FieldPermissionCache

    @classmethod
    def create(
        cls,
        settings: Settings = None,
        session: requests.Session = None
    ) -> "AppContext":
        settings = settings or get_settings()
        api = ApiClient(settings.api, session=session)
        cache = QueryCache(settings.cache)
        return cls(
            settings=settings,
            api=api,
            cache=cache,
            permissions=FieldPermissionCache(api, cache)
        )

    def current_user(self) -> Optional[CurrentUser]:
        """The signed-in user, or None while it cannot be fetched."""
        try:
            return self.cache.fetch(CURRENT_USER_KEY, self.api.get_current_user)
        except ApiError as e:
            log.warning("Current user unavailable: %s", e)
            return None

    def scope_defaults(self) -> dict[str, OwnershipScope]:
        """Role-to-scope mapping; empty while it cannot be fetched."""
        try:
            return self.cache.fetch(SCOPE_DEFAULTS_KEY, self.api.get_scope_defaults)
        except ApiError as e:
            log.warning("Scope defaults unavailable: %s", e)
            return {}

    def default_scope(self) -> OwnershipScope:
        """Scope a list view opens with when the URL does not name one."""
        user = self.current_user()
        if user is None:
            return FALLBACK_SCOPE
        return resolve_default_scope(user.role, self.scope_defaults())

    def close(self) -> None:
        self.cache.clear()
        self.api.close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
