from datetime import date

from revops_lens.core.entities import Account, Opportunity
from revops_lens.grouping.hierarchy import build_account_groups
from revops_lens.grouping.working_set import (
    AccountSort,
    ExpansionState,
    OpportunitySort,
    build_account_working_set,
    narrow_accounts,
    narrow_opportunities,
)


def account(id_, name, **extra):
    return Account.model_validate({"Id": id_, "Name": name, **extra})


def opportunity(id_, name, **extra):
    return Opportunity.model_validate({"Id": id_, "Name": name, **extra})


ACCOUNTS = [
    account("1", "Acme", Industry="Technology", Priority_Score__c=50,
            Priority_Tier__c="🔶 Tier 2", SixSense_Intent_Score__c=90),
    account("2", "Globex", Industry="Manufacturing", Priority_Score__c=80,
            Priority_Tier__c="🔥 Tier 1", SixSense_Intent_Score__c=10),
    account("3", "acme labs", Industry="Biotech", ParentId="1", Priority_Score__c=80,
            Priority_Tier__c="🔥 Tier 1"),
    account("4", "Initech", Industry=None),
]


def test_search_matches_name_or_industry_case_insensitively():
    assert [a.id for a in narrow_accounts(ACCOUNTS, search="ACME")] == ["3", "1"]
    assert [a.id for a in narrow_accounts(ACCOUNTS, search="manufact")] == ["2"]


def test_tier_filter_matches_substring():
    assert [a.id for a in narrow_accounts(ACCOUNTS, priority_tier="Tier 1")] == ["2", "3"]


def test_priority_sort_is_stable_and_missing_scores_last():
    assert [a.id for a in narrow_accounts(ACCOUNTS, sort_by=AccountSort.PRIORITY)] == ["2", "3", "1", "4"]


def test_other_sorts():
    assert [a.id for a in narrow_accounts(ACCOUNTS, sort_by="intent")][:2] == ["1", "2"]
    assert [a.id for a in narrow_accounts(ACCOUNTS, sort_by="name")] == ["1", "3", "2", "4"]


def test_unknown_sort_keeps_backend_order():
    assert [a.id for a in narrow_accounts(ACCOUNTS, sort_by="revenue")] == ["1", "2", "3", "4"]


def test_working_set_groups_after_narrowing():
    working_set = build_account_working_set(ACCOUNTS, search="acme", sort_by="name")
    assert working_set.total_accounts == 2
    assert working_set.parent_group_count == 1
    assert working_set.groups[0].root.id == "1"
    assert [c.id for c in working_set.groups[0].children] == ["3"]


def test_child_without_its_parent_in_the_set_is_a_root():
    working_set = build_account_working_set(ACCOUNTS, priority_tier="Tier 1")
    assert [g.root.id for g in working_set.groups] == ["2", "3"]
    assert working_set.parent_group_count == 0


def test_opportunity_narrowing():
    opportunities = [
        opportunity("o1", "Renewal", StageName="Negotiation", Amount=100,
                    CloseDate="2026-03-01", Account={"Name": "Acme"}),
        opportunity("o2", "Expansion", StageName="Discovery", Amount=500,
                    CloseDate="2026-01-15T00:00:00.000Z", IsAtRisk__c=True),
        opportunity("o3", "Pilot", StageName="Discovery", Amount=None, IsAtRisk__c=None),
    ]

    by_date = narrow_opportunities(opportunities)
    assert [o.id for o in by_date] == ["o2", "o1", "o3"]
    assert by_date[0].close_date == date(2026, 1, 15)

    assert [o.id for o in narrow_opportunities(opportunities, search="acme")] == ["o1"]
    assert [o.id for o in narrow_opportunities(opportunities, stage="Discovery")] == ["o2", "o3"]
    assert [o.id for o in narrow_opportunities(opportunities, at_risk_only=True)] == ["o2"]
    assert [o.id for o in narrow_opportunities(opportunities, sort_by=OpportunitySort.AMOUNT)] == ["o2", "o1", "o3"]


def test_expansion_controls_visible_children():
    groups = build_account_groups(ACCOUNTS)
    expansion = ExpansionState()
    assert [r.id for r in expansion.visible_rows(groups)] == ["1", "2", "4"]

    assert expansion.toggle("1") is True
    assert [r.id for r in expansion.visible_rows(groups)] == ["1", "3", "2", "4"]

    assert expansion.toggle("1") is False
    assert not expansion.is_expanded("1")
