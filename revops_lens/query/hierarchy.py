"""
Role Hierarchy - Team Scope Resolution

Turns an ownership scope into the OwnerId values a list query is narrowed to.
"My team" means every active user whose role sits beneath the current
user's role; users without a role hierarchy fall back to direct reports by
manager.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..filters.scope import OwnershipScope


@dataclass(frozen=True)
class RoleNode:
    """A node in the Salesforce UserRole tree."""
    id: str
    parent_role_id: Optional[str] = None
    name: str = ""


@dataclass(frozen=True)
class UserWithRole:
    """An org user with role and manager links."""
    id: str
    user_role_id: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool = True


@dataclass
class RoleHierarchyResult:
    """Subordinates of one user and where they were derived from."""
    user_id: str
    user_role_id: Optional[str] = None
    subordinate_user_ids: list = field(default_factory=list)
    source: str = "none"  # role_hierarchy, manager_id, none


def subordinate_role_ids(root_role_id: str, roles: Iterable[RoleNode]) -> set[str]:
    """All roles strictly beneath `root_role_id`, breadth first; cycles are ignored."""
    children_by_parent: dict[str, list[str]] = {}
    for role in roles:
        if role.parent_role_id:
            children_by_parent.setdefault(role.parent_role_id, []).append(role.id)

    found: set[str] = set()
    queue = deque([root_role_id])
    while queue:
        current = queue.popleft()
        for child_id in children_by_parent.get(current, []):
            if child_id not in found and child_id != root_role_id:
                found.add(child_id)
                queue.append(child_id)
    return found


def resolve_role_hierarchy(
    user_id: str,
    user_role_id: Optional[str],
    roles: Sequence[RoleNode],
    users: Sequence[UserWithRole]
) -> RoleHierarchyResult:
    """Find the active users beneath `user_id`."""
    active = [u for u in users if u.is_active and u.id != user_id]
    result = RoleHierarchyResult(user_id=user_id, user_role_id=user_role_id)

    if user_role_id and roles:
        below = subordinate_role_ids(user_role_id, roles)
        result.subordinate_user_ids = [
            u.id for u in active if u.user_role_id and u.user_role_id in below
        ]
        result.source = "role_hierarchy"

    if not result.subordinate_user_ids:
        direct_reports = [u.id for u in active if u.manager_id == user_id]
        if direct_reports:
            result.subordinate_user_ids = direct_reports
            result.source = "manager_id"

    return result


def resolve_owner_ids(
    scope: Optional[OwnershipScope],
    user_id: str,
    subordinate_user_ids: Sequence[str] = ()
) -> Optional[list[str]]:
    """OwnerId values for a scope; None means no ownership clause."""
    if scope is None or scope == OwnershipScope.ALL:
        return None
    if scope == OwnershipScope.MINE:
        return [user_id]
    return [user_id] + [i for i in subordinate_user_ids if i != user_id]
