"""Tests for grouping permission keys by module."""

from entitlements.application.services.permission_resolver import group_by_module


def test_groups_and_orders_actions() -> None:
    keys = {
        "campaigns_export",
        "campaigns_read",
        "campaigns_create",
        "campaign_data_read",
        "reports_read",
    }
    assert group_by_module(keys) == {
        "campaign_data": ["read"],
        "campaigns": ["read", "create", "export"],
        "reports": ["read"],
    }


def test_modules_are_sorted() -> None:
    assert list(group_by_module(["users_read", "brands_read", "cards_read"])) == [
        "brands",
        "cards",
        "users",
    ]


def test_duplicates_collapse_and_unparseable_keys_are_skipped() -> None:
    keys = ["brands_read", "brands_read", "legacy-permission", "brands_fly"]
    assert group_by_module(keys) == {"brands": ["read"]}


def test_empty() -> None:
    assert group_by_module([]) == {}
