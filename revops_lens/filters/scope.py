"""
Ownership Scope

Scope narrows a record set by ownership:
- mine: records owned by the current user
- team: records owned by the user or anyone beneath them in the role hierarchy
- all:  no ownership narrowing

The default scope depends on the user's role and is resolved from a
server-supplied role-to-scope mapping, falling back to `mine`.
"""

from enum import Enum
from typing import Any, Mapping, Optional


class OwnershipScope(str, Enum):
    """Ownership-based narrowing of a record set."""
    MINE = "mine"
    TEAM = "team"
    ALL = "all"

    @classmethod
    def parse(cls, value: Any) -> Optional["OwnershipScope"]:
        """Lenient parse; accepts the legacy 'my' spelling, None for anything unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip().lower()
        if text == "my":
            return cls.MINE
        try:
            return cls(text)
        except ValueError:
            return None


class AppRole(str, Enum):
    """Application roles a Salesforce profile maps onto."""
    AE = "ae"
    AM = "am"
    CSM = "csm"
    SALES_LEADER = "sales-leader"
    EXECUTIVE = "executive"
    ADMIN = "admin"
    UNKNOWN = "unknown"


SCOPE_LABELS = {
    OwnershipScope.MINE: "My Records",
    OwnershipScope.TEAM: "My Team's",
    OwnershipScope.ALL: "All Records",
}

# Backend's out-of-the-box role defaults, used when an admin has not configured any
DEFAULT_ROLE_SCOPES = {
    AppRole.AE.value: OwnershipScope.MINE,
    AppRole.AM.value: OwnershipScope.MINE,
    AppRole.CSM.value: OwnershipScope.MINE,
    AppRole.SALES_LEADER.value: OwnershipScope.TEAM,
    AppRole.EXECUTIVE.value: OwnershipScope.ALL,
    AppRole.UNKNOWN.value: OwnershipScope.MINE,
}

FALLBACK_SCOPE = OwnershipScope.MINE


def parse_role_defaults(payload: Optional[Mapping[str, Any]]) -> dict[str, OwnershipScope]:
    """Decode a role -> scope mapping, dropping entries with unknown scopes."""
    defaults = {}
    for role, raw_scope in (payload or {}).items():
        scope = OwnershipScope.parse(raw_scope)
        if scope is not None:
            defaults[str(role)] = scope
    return defaults


def resolve_default_scope(
    role: Optional[str],
    role_defaults: Optional[Mapping[str, Any]]
) -> OwnershipScope:
    """
    Default scope for a role.

    Returns `role_defaults[role]` when present (an exact key match first,
    then the lower-cased role), otherwise `mine`. Pure: the same inputs
    always give the same scope.
    """
    if role is None or not role_defaults:
        return FALLBACK_SCOPE

    role_key = role.value if isinstance(role, AppRole) else str(role)
    for key in (role_key, role_key.lower()):
        if key in role_defaults:
            scope = OwnershipScope.parse(role_defaults[key])
            if scope is not None:
                return scope
    return FALLBACK_SCOPE
