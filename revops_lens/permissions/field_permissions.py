"""
Field-Level Permissions

Decides whether a column or detail section renders for the current user.

Defaults differ by purpose:
- Read visibility fails open: while permissions load, after a failed
  fetch, or for a field the map does not mention, the field is accessible.
- Write capability fails closed: in those same situations the field is
  not updateable.

Permission maps are fetched per object type, shared through the query
cache, and never patched in place; a refresh replaces the whole map.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

import requests

from ..client.api import ApiClient, ApiError
from ..client.cache import QueryCache
from ..core.entities import FieldPermission

log = logging.getLogger(__name__)

CACHE_NAMESPACE = "fieldPermissions"


class FieldPermissionGate:
    """Read-only view over one object type's field permissions."""

    def __init__(self, object_type: str, permissions: Optional[Mapping[str, FieldPermission]] = None):
        self.object_type = object_type
        self._permissions = (
            MappingProxyType(dict(permissions)) if permissions is not None else None
        )

    @property
    def is_loaded(self) -> bool:
        return self._permissions is not None

    @property
    def permissions(self) -> Optional[Mapping[str, FieldPermission]]:
        return self._permissions

    def is_accessible(self, field_name: str) -> bool:
        if self._permissions is None:
            return True
        permission = self._permissions.get(field_name)
        if permission is None:
            return True
        return permission.accessible

    def is_updateable(self, field_name: str) -> bool:
        if self._permissions is None:
            return False
        permission = self._permissions.get(field_name)
        return permission.updateable if permission is not None else False

    def get_label(self, field_name: str) -> str:
        permission = (self._permissions or {}).get(field_name)
        return permission.label if permission is not None and permission.label else field_name

    def get_type(self, field_name: str) -> str:
        permission = (self._permissions or {}).get(field_name)
        return permission.type if permission is not None and permission.type else "string"

    def accessible_fields(self, field_names) -> list[str]:
        """Subset of `field_names` that may be shown, in the given order."""
        return [name for name in field_names if self.is_accessible(name)]


class FieldPermissionCache:
    """
    Read-through cache of permission gates keyed by object type.

    A failed fetch is not cached; the caller gets an unloaded gate and the
    next lookup tries again.
    """

    def __init__(self, client: ApiClient, cache: QueryCache):
        self._client = client
        self._cache = cache

    def get(self, object_type: str, refresh: bool = False) -> FieldPermissionGate:
        if not object_type:
            return FieldPermissionGate(object_type)

        key = (CACHE_NAMESPACE, object_type)
        try:
            permissions = self._cache.fetch(
                key,
                lambda: self._client.get_field_permissions(object_type),
                force=refresh
            )
        except (ApiError, requests.RequestException, ValueError) as e:
            log.warning("Field permissions for %s unavailable: %s", object_type, e)
            return FieldPermissionGate(object_type)
        return FieldPermissionGate(object_type, permissions)

    def peek(self, object_type: str) -> FieldPermissionGate:
        """Gate from whatever is cached, without fetching."""
        permissions = self._cache.get((CACHE_NAMESPACE, object_type), allow_stale=True)
        return FieldPermissionGate(object_type, permissions)

    def invalidate(self, object_type: Optional[str] = None) -> None:
        prefix = (CACHE_NAMESPACE, object_type) if object_type else (CACHE_NAMESPACE,)
        self._cache.invalidate(prefix)
