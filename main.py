#!/usr/bin/env python3
"""
RevOps Lens - Demo

Runs the list filtering pipeline against an in-memory account set:
1. Filter state with URL round trip
2. Query parameters and query key for the fetch layer
3. Local narrowing and parent/child grouping
4. Server-side validation and SOQL for the same state
"""

import logging

from revops_lens.config import get_settings
from revops_lens.core.entities import Account
from revops_lens.filters import (
    DEFAULT_ROLE_SCOPES,
    FilterDraft,
    ListFilterController,
    filter_label,
    resolve_default_scope
)
from revops_lens.grouping import build_account_working_set
from revops_lens.query import QueryBuilder, parse_list_query_params, resolve_owner_ids
from revops_lens.use_cases import ACCOUNT_FILTER_FIELDS

SAMPLE_ACCOUNTS = [
    {"Id": "001A", "Name": "Acme Holdings", "Industry": "Technology",
     "Priority_Score__c": 92, "Priority_Tier__c": "🔥 Tier 1", "SixSense_Intent_Score__c": 81},
    {"Id": "001B", "Name": "Acme Europe", "Industry": "Technology", "ParentId": "001A",
     "Priority_Score__c": 74, "Priority_Tier__c": "🔶 Tier 2", "SixSense_Intent_Score__c": 64},
    {"Id": "001C", "Name": "Acme Labs", "Industry": "Technology", "ParentId": "001A",
     "Priority_Score__c": 55, "Priority_Tier__c": "🔶 Tier 2", "SixSense_Intent_Score__c": 40},
    {"Id": "001D", "Name": "Globex", "Industry": "Manufacturing",
     "Priority_Score__c": 88, "Priority_Tier__c": "🔥 Tier 1", "SixSense_Intent_Score__c": 90},
    {"Id": "001E", "Name": "Initech Canada", "Industry": "Technology", "ParentId": "001Z",
     "Priority_Score__c": 61, "Priority_Tier__c": "🔶 Tier 2", "SixSense_Intent_Score__c": 22},
]


def run_filter_state_demo() -> ListFilterController:
    """Build a filter state the way a user would and show its URL."""
    print("=" * 60)
    print("FILTER STATE")
    print("=" * 60)
    print()

    role = "sales-leader"
    default_scope = resolve_default_scope(role, DEFAULT_ROLE_SCOPES)
    print(f"Role {role!r} opens with scope: {default_scope.value}")

    settings = get_settings()
    controller = ListFilterController.initialize(
        "accounts",
        "",
        role_default_scope=default_scope,
        default_sort_field=settings.lists.account_default_sort,
        default_sort_direction=settings.lists.default_sort_direction,
        fields=ACCOUNT_FILTER_FIELDS
    )

    draft = FilterDraft(ACCOUNT_FILTER_FIELDS)
    draft.select_field("Industry")
    draft.set_value("Technology")
    controller.add_filter(draft.submit())

    draft.select_field("AnnualRevenue")
    draft.select_operator("gte")
    draft.set_value("1000000")
    controller.add_filter(draft.submit())

    controller.set_search("acme")
    controller.set_scope("all")

    print("Active filters:")
    for i, criteria in enumerate(controller.filters):
        print(f"  [{i}] {filter_label(criteria, ACCOUNT_FILTER_FIELDS)}")
    print()
    print(f"URL:          ?{controller.query_string}")
    print(f"Query params: {controller.query_params}")
    print(f"Query key:    {controller.query_key}")
    print()

    reloaded = ListFilterController.initialize(
        "accounts",
        controller.query_string,
        role_default_scope=default_scope,
        default_sort_field=settings.lists.account_default_sort,
        default_sort_direction=settings.lists.default_sort_direction,
        fields=ACCOUNT_FILTER_FIELDS
    )
    print(f"Reloaded from URL, same state: {reloaded.state == controller.state}")
    print()
    return controller


def run_grouping_demo() -> None:
    """Narrow and group the sample accounts."""
    print("=" * 60)
    print("ACCOUNT GROUPING")
    print("=" * 60)
    print()

    accounts = [Account.model_validate(a) for a in SAMPLE_ACCOUNTS]
    working_set = build_account_working_set(accounts, sort_by="priority")

    print(f"{working_set.total_accounts} accounts "
          f"({working_set.parent_group_count} parent groups)")
    for group in working_set.groups:
        marker = "standalone" if group.is_standalone else f"{len(group.children)} children"
        print(f"  {group.root.name:<20} [{marker}]")
        for child in group.children:
            print(f"    - {child.name}")
    print()


def run_query_demo(controller: ListFilterController) -> None:
    """Show what the backend builds from the same request."""
    print("=" * 60)
    print("SERVER-SIDE QUERY")
    print("=" * 60)
    print()

    params = parse_list_query_params(controller.query_params, ACCOUNT_FILTER_FIELDS)
    soql = QueryBuilder.from_params(
        "Account",
        ["Id", "Name", "Industry", "ParentId", "Owner.Name"],
        params,
        search_fields=["Name", "Industry"],
        owner_ids=resolve_owner_ids(params.scope, "005000000000001"),
        max_limit=get_settings().lists.max_query_limit
    )
    print(soql)
    print()


def main():
    """Main entry point."""
    settings = get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print()
    print(f"{settings.app_name} demo")
    print()

    controller = run_filter_state_demo()
    run_grouping_demo()
    run_query_demo(controller)


if __name__ == "__main__":
    main()
