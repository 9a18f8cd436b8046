"""
Accounts List

The accounts page end to end:
1. Open with the URL's scope, or the role default when it names none
2. Fetch accounts for the current scope / filters / search / sort,
   cached under the controller's query key
3. Narrow locally (search box, priority tier, sort)
4. Group child accounts under their parents
5. Hide columns the user cannot read

A failed fetch is reported on the result; the filter state is untouched
by it, and retrying with the same state fetches the same key again.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from ..client.api import ApiError
from ..context import AppContext
from ..core.entities import Account
from ..filters.criteria import FieldDefinition, FieldType
from ..filters.state import ListFilterController
from ..filters.url import UrlQuery
from ..grouping.hierarchy import parent_group_count
from ..grouping.working_set import ALL_TIERS, AccountSort, ExpansionState, build_account_working_set
from ..permissions.field_permissions import FieldPermissionGate

log = logging.getLogger(__name__)

OBJECT_TYPE = "Account"
RESOURCE_TYPE = "accounts"

ACCOUNT_FILTER_FIELDS = (
    FieldDefinition("Industry", "Industry", FieldType.STRING),
    FieldDefinition("Name", "Account Name", FieldType.STRING),
    FieldDefinition("accountIntentScore6sense__c", "Intent Score", FieldType.NUMBER),
    FieldDefinition("AnnualRevenue", "Annual Revenue", FieldType.NUMBER),
    FieldDefinition("NumberOfEmployees", "Employees", FieldType.NUMBER),
    FieldDefinition(
        "accountBuyingStage6sense__c", "Buying Stage", FieldType.PICKLIST,
        ("Decision", "Consideration", "Awareness", "Target")
    ),
)

# Table columns and the Salesforce field each one reads
ACCOUNT_COLUMNS = {
    "industry": "Industry",
    "priority": "Priority_Score__c",
    "intent": "SixSense_Intent_Score__c",
    "buying_stage": "SixSense_Buying_Stage__c",
    "employees": "Clay_Employee_Count__c",
}


@dataclass
class AccountListResult:
    """What the accounts page renders."""
    query_key: tuple = ()
    groups: list = field(default_factory=list)  # List of AccountGroup
    total_accounts: int = 0
    visible_columns: list = field(default_factory=list)
    error: Optional[str] = None

    @property
    def parent_group_count(self) -> int:
        return parent_group_count(self.groups)

    @property
    def is_error(self) -> bool:
        return self.error is not None


class AccountListView:
    """State and data of one accounts list page."""

    def __init__(
        self,
        context: AppContext,
        url: Union[str, Mapping[str, str], UrlQuery, None] = None
    ):
        self.context = context
        lists = context.settings.lists
        self.filters = ListFilterController.initialize(
            RESOURCE_TYPE,
            url,
            role_default_scope=context.default_scope(),
            default_sort_field=lists.account_default_sort,
            default_sort_direction=lists.default_sort_direction,
            fields=ACCOUNT_FILTER_FIELDS
        )
        self.fields = ACCOUNT_FILTER_FIELDS

        # Local, page-only controls
        self.search_term = ""
        self.priority_tier = ALL_TIERS
        self.sort_by = AccountSort.PRIORITY
        self.expansion = ExpansionState()

    @property
    def field_permissions(self) -> FieldPermissionGate:
        return self.context.permissions.get(OBJECT_TYPE)

    def fetch_accounts(self, refresh: bool = False) -> list[Account]:
        """Accounts for the current filter state; raises ApiError on failure."""
        key = self.filters.query_key
        params = self.filters.query_params
        return self.context.cache.fetch(
            key,
            lambda: self.context.api.list_accounts(params),
            force=refresh
        )

    def load(self, refresh: bool = False) -> AccountListResult:
        key = self.filters.query_key
        gate = self.field_permissions
        columns = [name for name, sf_field in ACCOUNT_COLUMNS.items() if gate.is_accessible(sf_field)]

        try:
            accounts = self.fetch_accounts(refresh=refresh)
        except ApiError as e:
            log.warning("Loading accounts for %r failed: %s", key, e)
            return AccountListResult(query_key=key, visible_columns=columns, error=str(e))

        working_set = build_account_working_set(
            accounts,
            search=self.search_term,
            priority_tier=self.priority_tier,
            sort_by=self.sort_by
        )
        return AccountListResult(
            query_key=key,
            groups=working_set.groups,
            total_accounts=working_set.total_accounts,
            visible_columns=columns
        )

    def toggle(self, root_id: str) -> bool:
        return self.expansion.toggle(root_id)
