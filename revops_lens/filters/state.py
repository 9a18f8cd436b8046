"""
List Filter State

Reconciles the independent inputs of a list view into one query state:
- the URL query string (bookmarkable, shareable, possibly stale)
- the in-memory filter list (authoritative)
- the role default scope resolved from the server
- user interaction (scope switch, search box, sort, filter chips)

and derives the two projections a fetch layer needs:
- query_params: flat string map for the GET request
- query_key: identity tuple that changes exactly when the result can change

The controller is synchronous. Every mutation updates state and the URL
mirror in the same call, so a query key read afterwards never observes a
half-applied change.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from .criteria import (
    FieldDefinition,
    FilterCriteria,
    is_empty_value,
    parse_filters,
    serialize_filters,
    validate_against_catalog
)
from .scope import FALLBACK_SCOPE, OwnershipScope
from .url import UrlQuery

log = logging.getLogger(__name__)


class SortDirection(str, Enum):
    """Sort order for list queries."""
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Any) -> Optional["SortDirection"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class ListDefaults:
    """Values a list view falls back to when the URL says nothing."""
    scope: OwnershipScope = FALLBACK_SCOPE
    sort_field: str = ""
    sort_direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class ListQueryState:
    """Scope, filters, free-text search and sort of one list view."""
    scope: OwnershipScope = FALLBACK_SCOPE
    filters: tuple = field(default_factory=tuple)  # tuple of FilterCriteria
    search: str = ""
    sort_field: str = ""
    sort_direction: SortDirection = SortDirection.DESC

    @property
    def serialized_filters(self) -> str:
        return serialize_filters(self.filters) if self.filters else ""

    def to_url_params(self, defaults: ListDefaults = None) -> dict[str, Optional[str]]:
        """
        URL representation; None marks a key that must be absent.

        Values equal to the view's defaults are omitted so that every
        default-equivalent state maps to the same canonical URL.
        """
        defaults = defaults or ListDefaults()
        return {
            "scope": None if self.scope == defaults.scope else self.scope.value,
            "search": self.search or None,
            "sortField": None if self.sort_field == defaults.sort_field else (self.sort_field or None),
            "sortDir": None if self.sort_direction == defaults.sort_direction else self.sort_direction.value,
            "filters": self.serialized_filters or None,
        }

    def to_query_string(self, defaults: ListDefaults = None) -> str:
        url = UrlQuery()
        url.update(self.to_url_params(defaults))
        return url.to_string()

    @classmethod
    def from_url(
        cls,
        url: Union[str, Mapping[str, str], UrlQuery, None],
        defaults: ListDefaults = None,
        fields: Iterable[FieldDefinition] = None
    ) -> "ListQueryState":
        """
        Rebuild state from a URL, validating rather than trusting it.

        Unknown scopes and sort directions fall back to the defaults; a
        `filters` value that fails to parse or validate yields no filters.
        """
        defaults = defaults or ListDefaults()
        url = UrlQuery.parse(url)

        scope = defaults.scope
        if "scope" in url:
            parsed_scope = OwnershipScope.parse(url.get("scope"))
            if parsed_scope is None:
                log.debug("Ignoring unknown scope %r in URL", url.get("scope"))
            else:
                scope = parsed_scope

        sort_direction = defaults.sort_direction
        if "sortDir" in url:
            parsed_direction = SortDirection.parse(url.get("sortDir"))
            if parsed_direction is None:
                log.debug("Ignoring unknown sort direction %r in URL", url.get("sortDir"))
            else:
                sort_direction = parsed_direction

        try:
            filters = tuple(parse_filters(url.get("filters"), fields))
        except ValueError as e:
            log.debug("Resetting filters from URL: %s", e)
            filters = ()

        return cls(
            scope=scope,
            filters=filters,
            search=url.get("search", ""),
            sort_field=url.get("sortField", defaults.sort_field),
            sort_direction=sort_direction
        )


class ListFilterController:
    """
    Owns the query state of a single list view.

    One instance per list page; nothing else mutates it.
    """

    def __init__(
        self,
        resource_type: str,
        url: Union[str, Mapping[str, str], UrlQuery, None] = None,
        role_default_scope: Optional[OwnershipScope] = None,
        default_sort_field: str = "",
        default_sort_direction: Union[SortDirection, str] = SortDirection.DESC,
        fields: Sequence[FieldDefinition] = None
    ):
        self.resource_type = resource_type
        self.fields = list(fields) if fields is not None else None
        self.defaults = ListDefaults(
            scope=OwnershipScope.parse(role_default_scope) or FALLBACK_SCOPE,
            sort_field=default_sort_field or "",
            sort_direction=SortDirection.parse(default_sort_direction) or SortDirection.DESC
        )
        self._url = UrlQuery.parse(url)
        self._state = ListQueryState.from_url(self._url, self.defaults, self.fields)
        self._sync_url()

    @classmethod
    def initialize(
        cls,
        resource_type: str,
        url_params: Union[str, Mapping[str, str], UrlQuery, None],
        role_default_scope: Optional[OwnershipScope],
        default_sort_field: str = "",
        default_sort_direction: Union[SortDirection, str] = SortDirection.DESC,
        fields: Sequence[FieldDefinition] = None
    ) -> "ListFilterController":
        """Build a controller from the current URL and the resolved role default."""
        return cls(
            resource_type,
            url=url_params,
            role_default_scope=role_default_scope,
            default_sort_field=default_sort_field,
            default_sort_direction=default_sort_direction,
            fields=fields
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ListQueryState:
        return self._state

    @property
    def scope(self) -> OwnershipScope:
        return self._state.scope

    @property
    def filters(self) -> list[FilterCriteria]:
        return list(self._state.filters)

    @property
    def search(self) -> str:
        return self._state.search

    @property
    def sort_field(self) -> str:
        return self._state.sort_field

    @property
    def sort_direction(self) -> SortDirection:
        return self._state.sort_direction

    @property
    def url(self) -> UrlQuery:
        """A copy of the URL mirror."""
        return UrlQuery.parse(self._url)

    @property
    def query_string(self) -> str:
        return self._url.to_string()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_scope(self, scope: Union[OwnershipScope, str]) -> None:
        parsed = OwnershipScope.parse(scope)
        if parsed is None:
            raise ValueError(f"Unknown scope: {scope!r}")
        self._apply(scope=parsed)

    def set_search(self, search: Optional[str]) -> None:
        self._apply(search=search or "")

    def set_sort_field(self, sort_field: Optional[str]) -> None:
        self._apply(sort_field=sort_field or self.defaults.sort_field)

    def set_sort_direction(self, direction: Union[SortDirection, str]) -> None:
        parsed = SortDirection.parse(direction)
        if parsed is None:
            raise ValueError(f"Unknown sort direction: {direction!r}")
        self._apply(sort_direction=parsed)

    def add_filter(self, criteria: Union[FilterCriteria, Mapping[str, Any]]) -> bool:
        """
        Append a filter. Returns False, changing nothing, when the field or
        value is empty, the entry is not a well-formed criteria, or its operator
        does not fit the field's type in the catalog.
        """
        if not isinstance(criteria, FilterCriteria):
            if not criteria or not criteria.get("field") or is_empty_value(criteria.get("value")):
                return False
            try:
                criteria = FilterCriteria.model_validate(dict(criteria))
            except ValidationError as e:
                log.debug("Rejected filter %r: %s", criteria, e)
                return False
        if not criteria.field or is_empty_value(criteria.value):
            return False
        if self.fields is not None:
            try:
                validate_against_catalog([criteria], self.fields)
            except ValueError as e:
                log.debug("Rejected filter %r: %s", criteria, e)
                return False
        self._apply(filters=self._state.filters + (criteria,))
        return True

    def remove_filter(self, index: int) -> FilterCriteria:
        """Remove and return the filter at a display position."""
        filters = list(self._state.filters)
        if not 0 <= index < len(filters):
            raise IndexError(f"filter index {index} out of range for {len(filters)} filters")
        removed = filters.pop(index)
        self._apply(filters=tuple(filters))
        return removed

    def clear_filters(self) -> None:
        self._apply(filters=())

    def _apply(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        self._sync_url()

    def _sync_url(self) -> None:
        self._url.update(self._state.to_url_params(self.defaults))

    # -------------------------------------------------------------------------
    # Derived projections
    # -------------------------------------------------------------------------

    @property
    def query_params(self) -> dict[str, str]:
        """
        GET parameters. Scope is always sent once resolved; filters, search
        and sort only when non-empty.
        """
        state = self._state
        params = {"scope": state.scope.value}
        if state.filters:
            params["filters"] = state.serialized_filters
        if state.search:
            params["search"] = state.search
        if state.sort_field:
            params["sortField"] = state.sort_field
        if state.sort_direction:
            params["sortDir"] = state.sort_direction.value
        return params

    @property
    def query_key(self) -> tuple:
        state = self._state
        return (
            self.resource_type,
            state.scope.value,
            serialize_filters(state.filters),
            state.search,
            state.sort_field,
            state.sort_direction.value
        )

    def url_filters(self) -> list[FilterCriteria]:
        """Filters as decoded back from the URL mirror."""
        return parse_filters(self._url.get("filters"))
