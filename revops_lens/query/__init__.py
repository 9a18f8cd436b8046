"""
Server-side query construction.

Re-validates list parameters received as raw input and turns them into
escaped SOQL, including team-scope owner resolution.
"""

from .sanitizer import escape_soql_value, escape_soql_like, validate_field_name, validate_object_type
from .params import ListQueryParams, parse_list_query_params
from .builder import QueryBuilder, build_filter_clause
from .hierarchy import RoleNode, UserWithRole, resolve_role_hierarchy, resolve_owner_ids

__all__ = [
    "escape_soql_value",
    "escape_soql_like",
    "validate_field_name",
    "validate_object_type",
    "ListQueryParams",
    "parse_list_query_params",
    "QueryBuilder",
    "build_filter_clause",
    "RoleNode",
    "UserWithRole",
    "resolve_role_hierarchy",
    "resolve_owner_ids"
]
