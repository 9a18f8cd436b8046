"""
Account hierarchy grouping and local working-set narrowing.
"""

from .hierarchy import AccountGroup, build_account_groups, parent_group_count, flatten_groups
from .working_set import (
    AccountSort,
    OpportunitySort,
    AccountWorkingSet,
    ExpansionState,
    narrow_accounts,
    narrow_opportunities,
    build_account_working_set
)

__all__ = [
    "AccountGroup",
    "build_account_groups",
    "parent_group_count",
    "flatten_groups",
    "AccountSort",
    "OpportunitySort",
    "AccountWorkingSet",
    "ExpansionState",
    "narrow_accounts",
    "narrow_opportunities",
    "build_account_working_set"
]
