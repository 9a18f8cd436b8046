"""
List View Use Cases

The accounts and opportunities pages, wiring filter state, fetching,
local narrowing, grouping and field permissions together.
"""

from .account_list import AccountListView, AccountListResult, ACCOUNT_FILTER_FIELDS
from .opportunity_list import OpportunityListView, OpportunityListResult, OPPORTUNITY_FILTER_FIELDS

__all__ = [
    "AccountListView",
    "AccountListResult",
    "ACCOUNT_FILTER_FIELDS",
    "OpportunityListView",
    "OpportunityListResult",
    "OPPORTUNITY_FILTER_FIELDS"
]
