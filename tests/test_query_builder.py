import pytest

from revops_lens.filters.criteria import FilterCriteria
from revops_lens.filters.scope import OwnershipScope
from revops_lens.query.builder import MAX_LIMIT, QueryBuilder, build_filter_clause, format_value
from revops_lens.query.params import ListQueryParams
from revops_lens.query.sanitizer import (
    escape_soql_like,
    escape_soql_value,
    validate_field_name,
    validate_object_type,
)


def test_escape_value():
    assert escape_soql_value("O'Brien \\ co\0") == "O\\'Brien \\\\ co"
    assert escape_soql_value(42) == "42"


def test_escape_like_also_escapes_wildcards():
    assert escape_soql_like("100%_x") == "100\\%\\_x"


@pytest.mark.parametrize("name", ["Name", "Priority_Score__c", "Owner.Name", "Parent__r", "Account.Owner"])
def test_valid_field_names(name):
    assert validate_field_name(name)


@pytest.mark.parametrize("name", ["", None, "1Name", "Name; DELETE", "Owner.Name.Email", "Náme"])
def test_invalid_field_names(name):
    assert not validate_field_name(name)


def test_object_type_validation():
    assert validate_object_type("Account")
    assert validate_object_type("Renewal__c")
    assert not validate_object_type("Owner.Name")


def test_format_value():
    assert format_value(5) == "5"
    assert format_value(2.5) == "2.5"
    assert format_value("Tech") == "'Tech'"
    assert format_value(["A", "B"]) == "'A', 'B'"


@pytest.mark.parametrize(
    "criteria, clause",
    [
        (FilterCriteria(field="Industry", operator="eq", value="Tech"), "Industry = 'Tech'"),
        (FilterCriteria(field="Industry", operator="neq", value="Tech"), "Industry != 'Tech'"),
        (FilterCriteria(field="AnnualRevenue", operator="gte", value=1000), "AnnualRevenue >= 1000"),
        (FilterCriteria(field="Name", operator="contains", value="50%"), "Name LIKE '%50\\%%'"),
        (FilterCriteria(field="Stage", operator="in", value=["A", "B"]), "Stage IN ('A', 'B')"),
        (FilterCriteria(field="Stage", operator="not_in", value="A"), "Stage NOT IN ('A')"),
        (FilterCriteria(field="Amount", operator="between", value=["1", "9"]), "Amount >= '1' AND Amount <= '9'"),
        (FilterCriteria(field="Amount", operator="between", value="1"), ""),
    ],
)
def test_filter_clauses(criteria, clause):
    assert build_filter_clause(criteria) == clause


def test_builder_combines_clauses():
    soql = (
        QueryBuilder("Account")
        .select(["Id", "Name"])
        .with_scope(["005A", "005B"])
        .with_filters([FilterCriteria(field="Industry", operator="eq", value="Tech")])
        .with_search("acme", ["Name", "Industry", "bad field"])
        .with_sort("Name", "desc")
        .with_pagination(limit=5000, offset=10)
        .build()
    )
    assert soql == (
        "SELECT Id, Name FROM Account "
        "WHERE OwnerId IN ('005A', '005B') AND Industry = 'Tech' "
        "AND (Name LIKE '%acme%' OR Industry LIKE '%acme%') "
        f"ORDER BY Name DESC LIMIT {MAX_LIMIT} OFFSET 10"
    )


def test_single_owner_uses_equality():
    soql = QueryBuilder("Account").select(["Id"]).with_scope(["005A"]).build()
    assert soql == "SELECT Id FROM Account WHERE OwnerId = '005A'"


def test_invalid_filter_field_raises():
    with pytest.raises(ValueError, match="Invalid field name"):
        QueryBuilder("Account").with_filters([FilterCriteria(field="Name) OR (Id", operator="eq", value="x")])


def test_invalid_sort_field_is_ignored():
    soql = QueryBuilder("Account").select(["Id"]).with_sort("Name; --").build()
    assert "ORDER BY" not in soql


def test_build_requires_fields():
    with pytest.raises(ValueError):
        QueryBuilder("Account").build()


def test_accessible_fields_only():
    builder = QueryBuilder("Account").select(["Id", "Name", "Secret__c", "Owner.Name"])
    builder.with_accessible_fields_only(["Name"])
    assert builder.select_fields == ["Id", "Name", "Owner.Name"]


def test_from_params():
    params = ListQueryParams(
        scope=OwnershipScope.MINE,
        filters=[FilterCriteria(field="AnnualRevenue", operator="gt", value=10)],
        search="glob",
        sort_field="Name",
        sort_dir="ASC",
    )
    soql = QueryBuilder.from_params("Account", ["Id", "Name"], params, ["Name"], ["005A"])
    assert soql == (
        "SELECT Id, Name FROM Account WHERE OwnerId = '005A' AND AnnualRevenue > 10 "
        "AND (Name LIKE '%glob%') ORDER BY Name ASC"
    )
