"""
Core domain records.

Salesforce-shaped payloads validated at the network boundary.
"""

from .entities import Account, Opportunity, CurrentUser, FieldPermission

__all__ = [
    "Account",
    "Opportunity",
    "CurrentUser",
    "FieldPermission"
]
