"""
SOQL Query Builder

Builds SOQL from structured criteria instead of raw string templates:
every identifier is validated and every value escaped before it reaches
the query text.
"""

import logging
from typing import Iterable, Optional, Sequence, Union

from ..filters.criteria import FilterCriteria, FilterOperator
from .params import ListQueryParams
from .sanitizer import escape_soql_like, escape_soql_value, validate_field_name

log = logging.getLogger(__name__)

MAX_LIMIT = 2000

_COMPARISONS = {
    FilterOperator.EQ: "=",
    FilterOperator.NEQ: "!=",
    FilterOperator.LT: "<",
    FilterOperator.GT: ">",
    FilterOperator.LTE: "<=",
    FilterOperator.GTE: ">=",
}


def format_value(value: Union[str, int, float, list]) -> str:
    """Numbers render raw, strings quoted and escaped, lists comma-joined."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    return f"'{escape_soql_value(str(value))}'"


def build_filter_clause(criteria: FilterCriteria) -> str:
    """WHERE fragment for one filter; empty when the filter cannot be expressed."""
    field, operator, value = criteria.field, criteria.operator, criteria.value

    if operator in _COMPARISONS:
        return f"{field} {_COMPARISONS[operator]} {format_value(value)}"
    if operator == FilterOperator.CONTAINS:
        return f"{field} LIKE '%{escape_soql_like(str(value))}%'"
    if operator in (FilterOperator.IN, FilterOperator.NOT_IN):
        values = value if isinstance(value, list) else [value]
        keyword = "IN" if operator == FilterOperator.IN else "NOT IN"
        return f"{field} {keyword} ({format_value(values)})"
    if operator == FilterOperator.BETWEEN:
        if isinstance(value, list) and len(value) == 2:
            return (
                f"{field} >= {format_value(value[0])} AND "
                f"{field} <= {format_value(value[1])}"
            )
        return ""
    return ""


class QueryBuilder:
    """Fluent SOQL builder."""

    def __init__(self, object_type: str, max_limit: int = MAX_LIMIT):
        self.from_object = object_type
        self.max_limit = max_limit
        self.select_fields: list[str] = []
        self.where_clauses: list[str] = []
        self.order_by = ""
        self.limit: Optional[int] = None
        self.offset: Optional[int] = None

    def select(self, fields: Sequence[str]) -> "QueryBuilder":
        self.select_fields = list(fields)
        return self

    def with_scope(self, owner_ids: Optional[Sequence[str]]) -> "QueryBuilder":
        """OwnerId narrowing; None or empty means all records."""
        if not owner_ids:
            return self
        if len(owner_ids) == 1:
            self.where_clauses.append(f"OwnerId = '{escape_soql_value(owner_ids[0])}'")
        else:
            id_list = ", ".join(f"'{escape_soql_value(i)}'" for i in owner_ids)
            self.where_clauses.append(f"OwnerId IN ({id_list})")
        return self

    def with_filters(self, filters: Iterable[FilterCriteria]) -> "QueryBuilder":
        for criteria in filters:
            if not validate_field_name(criteria.field):
                raise ValueError(f"Invalid field name: {criteria.field}")
            clause = build_filter_clause(criteria)
            if clause:
                self.where_clauses.append(clause)
        return self

    def with_search(self, term: str, fields: Sequence[str]) -> "QueryBuilder":
        """OR of LIKE matches across the given fields."""
        if not term or not term.strip():
            return self
        escaped = escape_soql_like(term.strip())
        likes = [f"{f} LIKE '%{escaped}%'" for f in fields if validate_field_name(f)]
        if likes:
            self.where_clauses.append(f"({' OR '.join(likes)})")
        return self

    def with_sort(self, field: str, direction: str = "ASC") -> "QueryBuilder":
        if field and validate_field_name(field):
            direction = "DESC" if str(direction).upper() == "DESC" else "ASC"
            self.order_by = f"{field} {direction}"
        elif field:
            log.debug("Ignoring sort on invalid field %r", field)
        return self

    def with_pagination(self, limit: Optional[int] = None, offset: Optional[int] = None) -> "QueryBuilder":
        if limit is not None and limit > 0:
            self.limit = min(limit, self.max_limit)
        if offset is not None and offset > 0:
            self.offset = offset
        return self

    def with_accessible_fields_only(self, accessible_fields: Iterable[str]) -> "QueryBuilder":
        """Drop selected fields the user cannot read; Id and relationship fields stay."""
        accessible = set(accessible_fields)
        self.select_fields = [
            f for f in self.select_fields
            if f == "Id" or "." in f or f in accessible
        ]
        return self

    def build(self) -> str:
        if not self.select_fields:
            raise ValueError("No fields selected for query")
        if not self.from_object:
            raise ValueError("No object type specified")

        query = f"SELECT {', '.join(self.select_fields)} FROM {self.from_object}"
        if self.where_clauses:
            query += f" WHERE {' AND '.join(self.where_clauses)}"
        if self.order_by:
            query += f" ORDER BY {self.order_by}"
        if self.limit is not None:
            query += f" LIMIT {self.limit}"
        if self.offset is not None:
            query += f" OFFSET {self.offset}"
        return query

    @classmethod
    def from_params(
        cls,
        object_type: str,
        fields: Sequence[str],
        params: ListQueryParams,
        search_fields: Sequence[str],
        owner_ids: Optional[Sequence[str]],
        max_limit: int = MAX_LIMIT
    ) -> str:
        """Build a list query from parsed request parameters."""
        builder = cls(object_type, max_limit).select(fields).with_scope(owner_ids)

        if params.filters:
            builder.with_filters(params.filters)
        if params.search:
            builder.with_search(params.search, search_fields)
        if params.sort_field:
            builder.with_sort(params.sort_field, params.sort_dir or "ASC")

        builder.with_pagination(params.limit, params.offset)
        return builder.build()
