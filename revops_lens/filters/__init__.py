"""
List filtering state.

- Filter criteria and operator compatibility per field type
- Ownership scope and role defaults
- URL mirror and the list filter controller
"""

from .criteria import (
    FilterOperator,
    FieldType,
    FilterCriteria,
    FieldDefinition,
    FilterDraft,
    OPERATOR_LABELS,
    OPERATORS_BY_TYPE,
    operators_for_type,
    validate_criteria,
    filter_label,
    parse_filters,
    serialize_filters
)
from .scope import (
    OwnershipScope,
    AppRole,
    DEFAULT_ROLE_SCOPES,
    resolve_default_scope
)
from .url import UrlQuery
from .state import (
    SortDirection,
    ListDefaults,
    ListQueryState,
    ListFilterController
)

__all__ = [
    "FilterOperator",
    "FieldType",
    "FilterCriteria",
    "FieldDefinition",
    "FilterDraft",
    "OPERATOR_LABELS",
    "OPERATORS_BY_TYPE",
    "operators_for_type",
    "validate_criteria",
    "filter_label",
    "parse_filters",
    "serialize_filters",
    "OwnershipScope",
    "AppRole",
    "DEFAULT_ROLE_SCOPES",
    "resolve_default_scope",
    "UrlQuery",
    "SortDirection",
    "ListDefaults",
    "ListQueryState",
    "ListFilterController"
]
