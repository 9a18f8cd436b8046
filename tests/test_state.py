import random

import pytest

from revops_lens.filters.criteria import FieldDefinition, FieldType, FilterCriteria
from revops_lens.filters.scope import OwnershipScope
from revops_lens.filters.state import (
    ListDefaults,
    ListFilterController,
    ListQueryState,
    SortDirection,
)
from revops_lens.filters.url import UrlQuery

FIELDS = [
    FieldDefinition("Industry", "Industry", FieldType.STRING),
    FieldDefinition("AnnualRevenue", "Annual Revenue", FieldType.NUMBER),
    FieldDefinition("Stage", "Stage", FieldType.PICKLIST, ("Open", "Won")),
]

TECH = FilterCriteria(field="Industry", operator="eq", value="Tech")
BIG = FilterCriteria(field="AnnualRevenue", operator="gte", value=1000000)
OPEN = FilterCriteria(field="Stage", operator="in", value=["Open", "Won"])


def make_controller(url=None, default_scope=OwnershipScope.MINE, **kwargs):
    return ListFilterController.initialize(
        "accounts",
        url,
        role_default_scope=default_scope,
        default_sort_field=kwargs.pop("default_sort_field", "LastModifiedDate"),
        default_sort_direction=kwargs.pop("default_sort_direction", "DESC"),
        fields=kwargs.pop("fields", FIELDS),
    )


def random_state(rng: random.Random, defaults: ListDefaults) -> ListQueryState:
    candidates = [
        TECH,
        BIG,
        OPEN,
        FilterCriteria(field="Industry", operator="contains", value="a&b=c"),
        FilterCriteria(field="AnnualRevenue", operator="lt", value=2.5),
    ]
    return ListQueryState(
        scope=rng.choice(list(OwnershipScope)),
        filters=tuple(rng.choice(candidates) for _ in range(rng.randint(0, 4))),
        search=rng.choice(["", "acme", "100% café", "x+y z"]),
        sort_field=rng.choice([defaults.sort_field, "Name", "AnnualRevenue"]),
        sort_direction=rng.choice(list(SortDirection)),
    )


# =============================================================================
# URL round trip
# =============================================================================

def test_url_round_trip_for_random_states():
    rng = random.Random(7)
    defaults = ListDefaults(OwnershipScope.TEAM, "LastModifiedDate", SortDirection.DESC)
    for _ in range(200):
        state = random_state(rng, defaults)
        query = state.to_query_string(defaults)
        assert ListQueryState.from_url(query, defaults, FIELDS) == state


def test_default_state_maps_to_empty_url():
    defaults = ListDefaults(OwnershipScope.TEAM, "LastModifiedDate", SortDirection.DESC)
    state = ListQueryState(
        scope=OwnershipScope.TEAM,
        sort_field="LastModifiedDate",
        sort_direction=SortDirection.DESC,
    )
    assert state.to_query_string(defaults) == ""
    assert ListQueryState.from_url("", defaults) == state


def test_from_url_falls_back_on_unknown_values():
    defaults = ListDefaults(OwnershipScope.TEAM, "Name", SortDirection.ASC)
    state = ListQueryState.from_url("scope=everyone&sortDir=sideways&filters=%7Bbad", defaults)
    assert state.scope == OwnershipScope.TEAM
    assert state.sort_direction == SortDirection.ASC
    assert state.filters == ()


# =============================================================================
# Controller
# =============================================================================

def test_url_scope_wins_over_role_default():
    controller = make_controller("scope=all", default_scope=OwnershipScope.MINE)
    assert controller.scope == OwnershipScope.ALL


def test_role_default_used_without_url_scope():
    controller = make_controller("search=acme", default_scope=OwnershipScope.TEAM)
    assert controller.scope == OwnershipScope.TEAM
    assert controller.search == "acme"


def test_add_then_remove_leaves_no_filters_key():
    controller = make_controller()
    assert controller.add_filter({"field": "Industry", "operator": "eq", "value": "Tech"})

    controller.remove_filter(0)

    assert controller.filters == []
    assert "filters" not in controller.url


def test_malformed_url_filters_reset_to_empty():
    controller = make_controller("filters=%5B%7B%22field%22%3A%22Industry%22")
    assert controller.filters == []
    assert "filters" not in controller.url


def test_url_filters_with_wrong_operator_for_field_are_dropped():
    url = UrlQuery({"filters": '[{"field":"Industry","operator":"gt","value":"Tech"}]'})
    assert make_controller(url).filters == []


@pytest.mark.parametrize(
    "criteria",
    [
        {"field": "", "operator": "eq", "value": "Tech"},
        {"field": "Industry", "operator": "eq", "value": ""},
        {"field": "Industry", "operator": "eq", "value": []},
        {"field": "Industry", "operator": "eq"},
        {"field": "Industry", "operator": "nope", "value": "x"},
        {},
    ],
)
def test_add_filter_ignores_incomplete_criteria(criteria):
    controller = make_controller()
    before = controller.query_key
    assert controller.add_filter(criteria) is False
    assert controller.filters == []
    assert controller.query_key == before


def test_remove_filter_by_current_position():
    controller = make_controller()
    for criteria in (TECH, BIG, OPEN):
        controller.add_filter(criteria)

    assert controller.remove_filter(0) == TECH
    assert controller.remove_filter(1) == OPEN
    assert controller.filters == [BIG]


def test_remove_filter_out_of_range():
    controller = make_controller()
    controller.add_filter(TECH)
    with pytest.raises(IndexError):
        controller.remove_filter(1)
    with pytest.raises(IndexError):
        controller.remove_filter(-1)
    assert controller.filters == [TECH]


def test_filters_and_url_never_diverge():
    rng = random.Random(11)
    pool = [TECH, BIG, OPEN]
    controller = make_controller()
    for _ in range(300):
        action = rng.random()
        if action < 0.5:
            controller.add_filter(rng.choice(pool))
        elif action < 0.9 and controller.filters:
            controller.remove_filter(rng.randrange(len(controller.filters)))
        else:
            controller.clear_filters()
        assert controller.url_filters() == controller.filters


def test_set_scope_rejects_unknown_values():
    controller = make_controller()
    with pytest.raises(ValueError):
        controller.set_scope("everyone")
    controller.set_scope("my")
    assert controller.scope == OwnershipScope.MINE


def test_default_values_are_not_written_to_url():
    controller = make_controller(default_scope=OwnershipScope.TEAM)
    controller.set_scope("all")
    controller.set_sort_direction("ASC")
    assert controller.query_string == "scope=all&sortDir=ASC"

    controller.set_scope("team")
    controller.set_sort_direction("desc")
    assert controller.query_string == ""


def test_clearing_sort_field_restores_default():
    controller = make_controller()
    controller.set_sort_field("Name")
    assert controller.url.get("sortField") == "Name"

    controller.set_sort_field("")
    assert controller.sort_field == "LastModifiedDate"
    assert "sortField" not in controller.url


def test_foreign_url_keys_are_preserved():
    controller = make_controller("tab=details")
    controller.set_search("acme")
    assert controller.query_string == "search=acme&tab=details"


def test_query_params_omit_empty_values():
    controller = make_controller(default_sort_field="")
    assert controller.query_params == {"scope": "mine", "sortDir": "DESC"}

    controller.add_filter(TECH)
    controller.set_search("acme")
    controller.set_sort_field("Name")
    assert controller.query_params == {
        "scope": "mine",
        "filters": '[{"field":"Industry","operator":"eq","value":"Tech"}]',
        "search": "acme",
        "sortField": "Name",
        "sortDir": "DESC",
    }


def test_query_key_changes_with_every_input():
    controller = make_controller()
    seen = {controller.query_key}

    controller.set_scope("team")
    seen.add(controller.query_key)
    controller.add_filter(TECH)
    seen.add(controller.query_key)
    controller.set_search("acme")
    seen.add(controller.query_key)
    controller.set_sort_field("Name")
    seen.add(controller.query_key)
    controller.set_sort_direction("ASC")
    seen.add(controller.query_key)

    assert len(seen) == 6


def test_query_key_equal_for_equal_states():
    first = make_controller()
    second = make_controller()
    first.add_filter(TECH)
    second.add_filter({"field": "Industry", "operator": "eq", "value": "Tech"})
    assert first.query_key == second.query_key
    assert first.query_key[0] == "accounts"


def test_url_property_is_a_copy():
    controller = make_controller()
    controller.url.set("scope", "all")
    assert controller.scope == OwnershipScope.MINE
    assert "scope" not in controller.url


def test_add_filter_rejects_operator_the_field_type_does_not_offer():
    controller = make_controller()
    controller.add_filter(TECH)
    before = controller.query_string

    added = controller.add_filter({"field": "AnnualRevenue", "operator": "contains", "value": "x"})

    assert added is False
    assert controller.filters == [TECH]
    assert controller.query_string == before

    reloaded = make_controller(controller.query_string)
    assert reloaded.state == controller.state


def test_add_filter_without_catalog_accepts_any_known_operator():
    controller = make_controller(fields=None)
    assert controller.add_filter({"field": "AnnualRevenue", "operator": "contains", "value": "x"})


def test_integral_float_and_int_values_share_a_query_key():
    with_int = make_controller()
    with_float = make_controller()
    with_int.add_filter({"field": "AnnualRevenue", "operator": "gte", "value": 5})
    with_float.add_filter({"field": "AnnualRevenue", "operator": "gte", "value": 5.0})
    assert with_int.query_key == with_float.query_key
