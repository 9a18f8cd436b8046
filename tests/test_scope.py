import pytest

from revops_lens.filters.scope import (
    DEFAULT_ROLE_SCOPES,
    SCOPE_LABELS,
    AppRole,
    OwnershipScope,
    parse_role_defaults,
    resolve_default_scope,
)


def test_role_with_configured_default():
    assert resolve_default_scope("ae", {"ae": "mine", "am": "team"}) == OwnershipScope.MINE
    assert resolve_default_scope("am", {"ae": "mine", "am": "team"}) == OwnershipScope.TEAM


def test_role_missing_from_mapping_falls_back_to_mine():
    assert resolve_default_scope("finance", {"ae": "mine", "am": "team"}) == OwnershipScope.MINE


@pytest.mark.parametrize("defaults", [None, {}])
def test_no_mapping_falls_back_to_mine(defaults):
    assert resolve_default_scope("executive", defaults) == OwnershipScope.MINE


def test_no_role_falls_back_to_mine():
    assert resolve_default_scope(None, DEFAULT_ROLE_SCOPES) == OwnershipScope.MINE


def test_role_lookup_tries_lowercase():
    assert resolve_default_scope("Executive", DEFAULT_ROLE_SCOPES) == OwnershipScope.ALL
    assert resolve_default_scope(AppRole.SALES_LEADER, DEFAULT_ROLE_SCOPES) == OwnershipScope.TEAM


def test_invalid_scope_in_mapping_falls_back():
    assert resolve_default_scope("ae", {"ae": "everyone"}) == OwnershipScope.MINE


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("mine", OwnershipScope.MINE),
        ("my", OwnershipScope.MINE),
        (" Team ", OwnershipScope.TEAM),
        ("ALL", OwnershipScope.ALL),
        (OwnershipScope.TEAM, OwnershipScope.TEAM),
        ("everyone", None),
        (None, None),
        (3, None),
    ],
)
def test_scope_parse(raw, expected):
    assert OwnershipScope.parse(raw) == expected


def test_parse_role_defaults_drops_unknown_scopes():
    parsed = parse_role_defaults({"ae": "my", "executive": "all", "intern": "nobody"})
    assert parsed == {"ae": OwnershipScope.MINE, "executive": OwnershipScope.ALL}


def test_every_scope_has_a_label():
    assert set(SCOPE_LABELS) == set(OwnershipScope)
