"""
Filter Criteria - Field / Operator / Value Predicates

A filter is one report-style predicate contributed through the filter bar.
Filters are held in an ordered list (insertion order is chip display order)
and travel to the backend as a JSON array of {field, operator, value}.

Operator compatibility is keyed by the field's declared type:
- string:   equals, not equals, contains
- number:   equals, not equals, <, >, <=, >=
- date:     equals, <, >, <=, >=
- picklist: equals, not equals, in

Unknown field types fall back to the string operator set.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, ValidationError, field_validator


class FilterOperator(str, Enum):
    """Closed set of filter operators."""
    EQ = "eq"
    NEQ = "neq"
    LT = "lt"
    GT = "gt"
    LTE = "lte"
    GTE = "gte"
    CONTAINS = "contains"
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"


class FieldType(str, Enum):
    """Declared semantic type of a filterable field."""
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    PICKLIST = "picklist"


OPERATOR_LABELS = {
    FilterOperator.EQ: "equals",
    FilterOperator.NEQ: "not equals",
    FilterOperator.LT: "less than",
    FilterOperator.GT: "greater than",
    FilterOperator.LTE: "at most",
    FilterOperator.GTE: "at least",
    FilterOperator.CONTAINS: "contains",
    FilterOperator.IN: "in",
    FilterOperator.NOT_IN: "not in",
    FilterOperator.BETWEEN: "between",
}

OPERATORS_BY_TYPE = {
    FieldType.STRING: (
        FilterOperator.EQ, FilterOperator.NEQ, FilterOperator.CONTAINS
    ),
    FieldType.NUMBER: (
        FilterOperator.EQ, FilterOperator.NEQ,
        FilterOperator.LT, FilterOperator.GT,
        FilterOperator.LTE, FilterOperator.GTE
    ),
    FieldType.DATE: (
        FilterOperator.EQ,
        FilterOperator.LT, FilterOperator.GT,
        FilterOperator.LTE, FilterOperator.GTE
    ),
    FieldType.PICKLIST: (
        FilterOperator.EQ, FilterOperator.NEQ, FilterOperator.IN
    ),
}


FilterValue = Union[StrictInt, StrictFloat, StrictStr, list[StrictStr]]


class FilterCriteria(BaseModel):
    """A single field + operator + value predicate."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    field: StrictStr
    operator: FilterOperator
    value: FilterValue

    @field_validator("value")
    @classmethod
    def _integral_float_is_int(cls, value: Any) -> Any:
        # 5.0 and 5 must serialize identically
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    def to_wire(self) -> dict:
        """Plain dict in the {field, operator, value} wire shape."""
        value = list(self.value) if isinstance(self.value, list) else self.value
        return {"field": self.field, "operator": self.operator.value, "value": value}


@dataclass(frozen=True)
class FieldDefinition:
    """A queryable attribute offered in the filter bar."""
    name: str
    label: str
    type: FieldType = FieldType.STRING
    picklist_values: tuple = field(default_factory=tuple)


def coerce_field_type(value: Any) -> FieldType:
    """Map any declared type onto the four known types; unknown means string."""
    if isinstance(value, FieldType):
        return value
    try:
        return FieldType(str(value).lower())
    except ValueError:
        return FieldType.STRING


def operators_for_type(field_type: Any) -> tuple:
    """Operators valid for a declared field type."""
    return OPERATORS_BY_TYPE[coerce_field_type(field_type)]


def find_field(fields: Iterable[FieldDefinition], name: str) -> Optional[FieldDefinition]:
    for definition in fields or ():
        if definition.name == name:
            return definition
    return None


def is_empty_value(value: Any) -> bool:
    """True for values that must never enter the filter list."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, float):
        return math.isnan(value)
    return False


def validate_criteria(criteria: FilterCriteria, field_type: Any) -> FilterCriteria:
    """
    Check that the operator is allowed for the field's type.

    Raises ValueError on an incompatible pairing. Used wherever filters are
    accepted as raw input rather than built through the filter bar.
    """
    allowed = operators_for_type(field_type)
    if criteria.operator not in allowed:
        raise ValueError(
            f"Operator {criteria.operator.value!r} is not valid for "
            f"{coerce_field_type(field_type).value} field {criteria.field!r}"
        )
    return criteria


def validate_against_catalog(
    filters: Sequence[FilterCriteria],
    fields: Iterable[FieldDefinition]
) -> list[FilterCriteria]:
    """Validate every filter against a field catalog; unknown fields are string-typed."""
    fields = list(fields)
    for criteria in filters:
        definition = find_field(fields, criteria.field)
        validate_criteria(criteria, definition.type if definition else FieldType.STRING)
    return list(filters)


def filter_label(criteria: FilterCriteria, fields: Iterable[FieldDefinition] = ()) -> str:
    """Human-readable chip text, e.g. 'Industry equals Tech'."""
    definition = find_field(fields, criteria.field)
    field_label = definition.label if definition and definition.label else criteria.field
    op_label = OPERATOR_LABELS.get(criteria.operator, criteria.operator.value)
    if isinstance(criteria.value, list):
        value_text = ", ".join(criteria.value)
    else:
        value_text = str(criteria.value)
    return f"{field_label} {op_label} {value_text}"


# =============================================================================
# JSON serialization
# =============================================================================

def serialize_filters(filters: Sequence[FilterCriteria]) -> str:
    """Compact JSON array, identical for structurally equal filter lists."""
    return json.dumps([f.to_wire() for f in filters], separators=(",", ":"))


def parse_filters(
    raw: Optional[str],
    fields: Iterable[FieldDefinition] = None
) -> list[FilterCriteria]:
    """
    Parse a JSON-encoded filter list.

    Raises ValueError when the text is not a JSON array of valid criteria,
    or, given a field catalog, when any operator does not fit its field.
    An absent or empty string parses to an empty list.
    """
    if not raw:
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"filters is not valid JSON: {e}") from e
    if not isinstance(payload, list):
        raise ValueError("filters must be a JSON array")

    filters = []
    for entry in payload:
        try:
            criteria = FilterCriteria.model_validate(entry)
        except ValidationError as e:
            raise ValueError(f"invalid filter entry {entry!r}") from e
        if not criteria.field or is_empty_value(criteria.value):
            raise ValueError(f"incomplete filter entry {entry!r}")
        filters.append(criteria)

    if fields is not None:
        validate_against_catalog(filters, fields)
    return filters


# =============================================================================
# Filter bar draft
# =============================================================================

class FilterDraft:
    """
    The in-progress filter being composed in the filter bar.

    Choosing a field resets the operator to equals and clears the pending
    value so a stale operator/value pairing can never be submitted for the
    new field. `submit()` yields nothing until both field and value are set.
    """

    def __init__(self, fields: Sequence[FieldDefinition]):
        self.fields = list(fields)
        self.field_name = ""
        self.operator = FilterOperator.EQ
        self.value: Any = ""

    @property
    def field_definition(self) -> Optional[FieldDefinition]:
        return find_field(self.fields, self.field_name)

    @property
    def available_operators(self) -> tuple:
        definition = self.field_definition
        return operators_for_type(definition.type if definition else FieldType.STRING)

    def select_field(self, name: str) -> None:
        self.field_name = name or ""
        self.operator = FilterOperator.EQ
        self.value = ""

    def select_operator(self, operator: Union[FilterOperator, str]) -> None:
        operator = FilterOperator(operator)
        if operator not in self.available_operators:
            raise ValueError(f"Operator {operator.value!r} is not offered for {self.field_name!r}")
        self.operator = operator

    def set_value(self, value: Any) -> None:
        self.value = value

    @property
    def can_apply(self) -> bool:
        return self._build() is not None

    def submit(self) -> Optional[FilterCriteria]:
        """Build the criteria and reset the draft; None when incomplete."""
        criteria = self._build()
        if criteria is not None:
            self.select_field("")
        return criteria

    def _build(self) -> Optional[FilterCriteria]:
        if not self.field_name or is_empty_value(self.value):
            return None

        value = self.value
        definition = self.field_definition
        if definition is not None and definition.type == FieldType.NUMBER:
            value = _parse_number(value)
            if value is None:
                return None
        elif isinstance(value, (list, tuple)):
            value = [str(v) for v in value]

        return FilterCriteria(field=self.field_name, operator=self.operator, value=value)


def _parse_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number) if number.is_integer() else number
