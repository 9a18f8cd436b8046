"""
Field-level security gates.
"""

from .field_permissions import FieldPermissionGate, FieldPermissionCache

__all__ = [
    "FieldPermissionGate",
    "FieldPermissionCache"
]
