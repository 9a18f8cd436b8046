"""
SOQL Sanitization

Escapes user-provided values before they are interpolated into SOQL and
validates identifiers against Salesforce naming rules.
"""

import re

_FIELD_NAME = re.compile(r"^[a-zA-Z_]\w*(\.\w+)?(__[cr])?$", re.ASCII)
_OBJECT_TYPE = re.compile(r"^[a-zA-Z_]\w*(__c)?$", re.ASCII)


def escape_soql_value(value) -> str:
    """Strip NUL bytes, then escape backslashes and single quotes."""
    if not isinstance(value, str):
        return str(value)
    return (
        value
        .replace("\0", "")
        .replace("\\", "\\\\")
        .replace("'", "\\'")
    )


def escape_soql_like(value) -> str:
    """escape_soql_value plus the LIKE wildcards % and _."""
    if not isinstance(value, str):
        return str(value)
    return escape_soql_value(value).replace("%", "\\%").replace("_", "\\_")


def validate_field_name(name) -> bool:
    """Standard, custom (__c/__r) and one-hop relationship fields like Owner.Name."""
    if not name or not isinstance(name, str):
        return False
    return _FIELD_NAME.fullmatch(name) is not None


def validate_object_type(name) -> bool:
    if not name or not isinstance(name, str):
        return False
    return _OBJECT_TYPE.fullmatch(name) is not None
