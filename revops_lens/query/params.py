"""
List Request Parameters

Reads the query string a list endpoint receives back into typed values.
Nothing arriving here is trusted: scope must be a known value, the sort
direction is normalised, and the filter JSON is re-validated.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..filters.criteria import FieldDefinition, parse_filters
from ..filters.scope import OwnershipScope

log = logging.getLogger(__name__)


@dataclass
class ListQueryParams:
    """Parsed list request."""
    scope: Optional[OwnershipScope] = None
    filters: list = field(default_factory=list)  # List of FilterCriteria
    search: Optional[str] = None
    sort_field: Optional[str] = None
    sort_dir: Optional[str] = None  # ASC, DESC
    limit: Optional[int] = None
    offset: Optional[int] = None
    list_view_id: Optional[str] = None


def _int_or_none(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def parse_list_query_params(
    query: Mapping[str, str],
    fields: Iterable[FieldDefinition] = None
) -> ListQueryParams:
    """
    Parse filter/scope/sort parameters of a list request.

    A malformed or invalid `filters` value yields an empty filter list;
    with a field catalog, operator/type mismatches count as invalid.
    """
    params = ListQueryParams()

    if query.get("scope"):
        params.scope = OwnershipScope.parse(query["scope"])

    if query.get("filters"):
        try:
            params.filters = parse_filters(query["filters"], fields)
        except ValueError as e:
            log.warning("Discarding invalid filters parameter: %s", e)
            params.filters = []

    if query.get("search"):
        params.search = query["search"]

    if query.get("sortField"):
        params.sort_field = query["sortField"]

    if query.get("sortDir"):
        params.sort_dir = "DESC" if str(query["sortDir"]).upper() == "DESC" else "ASC"

    params.limit = _int_or_none(query.get("limit"))
    params.offset = _int_or_none(query.get("offset"))

    if query.get("listViewId"):
        params.list_view_id = query["listViewId"]

    return params
