"""
Working Set Narrowing

Local search, filtering and ordering applied to a fetched record list
before it is grouped and rendered. All sorts are stable, so records that
compare equal keep the order the backend returned them in.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from ..core.entities import Account, Opportunity
from .hierarchy import AccountGroup, build_account_groups, parent_group_count

ALL_TIERS = "all"
ALL_STAGES = "all"


class AccountSort(str, Enum):
    """Local sort keys for the accounts list."""
    PRIORITY = "priority"
    INTENT = "intent"
    NAME = "name"


class OpportunitySort(str, Enum):
    """Local sort keys for the opportunities list."""
    CLOSE_DATE = "closeDate"
    AMOUNT = "amount"
    NAME = "name"


@dataclass
class AccountWorkingSet:
    """Narrowed accounts and the groups built from them."""
    groups: list = field(default_factory=list)  # List of AccountGroup
    total_accounts: int = 0

    @property
    def parent_group_count(self) -> int:
        return parent_group_count(self.groups)


def _matches(text: Optional[str], needle: str) -> bool:
    return bool(text) and needle in text.lower()


def narrow_accounts(
    accounts: Iterable[Account],
    search: str = "",
    priority_tier: str = ALL_TIERS,
    sort_by: str = AccountSort.PRIORITY
) -> list[Account]:
    """Search by name or industry, keep one priority tier, then sort."""
    narrowed = list(accounts)

    if search:
        needle = search.lower()
        narrowed = [a for a in narrowed if _matches(a.name, needle) or _matches(a.industry, needle)]

    if priority_tier and priority_tier != ALL_TIERS:
        narrowed = [a for a in narrowed if a.priority_tier and priority_tier in a.priority_tier]

    try:
        sort_by = AccountSort(sort_by)
    except ValueError:
        return narrowed

    if sort_by == AccountSort.PRIORITY:
        narrowed.sort(key=lambda a: a.priority_score or 0, reverse=True)
    elif sort_by == AccountSort.INTENT:
        narrowed.sort(key=lambda a: a.intent_score or 0, reverse=True)
    elif sort_by == AccountSort.NAME:
        narrowed.sort(key=lambda a: a.name.casefold())
    return narrowed


def build_account_working_set(
    accounts: Iterable[Account],
    search: str = "",
    priority_tier: str = ALL_TIERS,
    sort_by: str = AccountSort.PRIORITY
) -> AccountWorkingSet:
    """Narrow, sort and group accounts for two-level display."""
    narrowed = narrow_accounts(accounts, search, priority_tier, sort_by)
    return AccountWorkingSet(
        groups=build_account_groups(narrowed),
        total_accounts=len(narrowed)
    )


def narrow_opportunities(
    opportunities: Iterable[Opportunity],
    search: str = "",
    stage: str = ALL_STAGES,
    at_risk_only: bool = False,
    sort_by: str = OpportunitySort.CLOSE_DATE
) -> list[Opportunity]:
    """Search by deal or account name, keep one stage and optionally only at-risk deals."""
    narrowed = list(opportunities)

    if search:
        needle = search.lower()
        narrowed = [
            o for o in narrowed
            if _matches(o.name, needle) or _matches(o.account_name, needle)
        ]

    if stage and stage != ALL_STAGES:
        narrowed = [o for o in narrowed if o.stage_name == stage]

    if at_risk_only:
        narrowed = [o for o in narrowed if o.is_at_risk]

    try:
        sort_by = OpportunitySort(sort_by)
    except ValueError:
        return narrowed

    if sort_by == OpportunitySort.CLOSE_DATE:
        # Undated deals sink to the bottom
        narrowed.sort(key=lambda o: (o.close_date is None, o.close_date or date.min))
    elif sort_by == OpportunitySort.AMOUNT:
        narrowed.sort(key=lambda o: o.amount or 0, reverse=True)
    elif sort_by == OpportunitySort.NAME:
        narrowed.sort(key=lambda o: o.name.casefold())
    return narrowed


class ExpansionState:
    """Which group roots are toggled open, keyed by root id."""

    def __init__(self, expanded: Iterable[str] = ()):
        self._expanded = set(expanded)

    def toggle(self, root_id: str) -> bool:
        """Flip a root; returns whether it is now expanded."""
        if root_id in self._expanded:
            self._expanded.discard(root_id)
            return False
        self._expanded.add(root_id)
        return True

    def is_expanded(self, root_id: str) -> bool:
        return root_id in self._expanded

    def visible_rows(self, groups: Sequence[AccountGroup]) -> list:
        """Rows to render: every root, plus children of expanded roots."""
        rows = []
        for group in groups:
            rows.append(group.root)
            if group.children and self.is_expanded(group.root.id):
                rows.extend(group.children)
        return rows
