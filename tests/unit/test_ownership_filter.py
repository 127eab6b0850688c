"""Unit tests for OwnershipFilter: predicate, mutation check, owner assignment."""

from types import SimpleNamespace

import pytest
from sqlalchemy import Integer, String, literal, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from entitlements.application.dtos.actor import Actor
from entitlements.application.services.ownership import OwnershipFilter
from entitlements.domain.decisions import DenialKind
from entitlements.domain.exceptions import OwnershipDeniedException

ALICE = Actor(id="alice")
ROOT = Actor(id="root", is_elevated=True)


@pytest.fixture
def ownership() -> OwnershipFilter:
    return OwnershipFilter()


def _sql(query) -> str:
    return str(query.compile(compile_kwargs={"literal_binds": True}))


def test_predicate_added_for_standard_actor(ownership, campaign_model) -> None:
    query = ownership.apply_ownership_predicate(ALICE, select(campaign_model))
    assert "test_campaign.owner_id = 'alice'" in _sql(query)


def test_predicate_skipped_for_elevated_actor(ownership, campaign_model) -> None:
    original = select(campaign_model)
    assert ownership.apply_ownership_predicate(ROOT, original) is original


def test_predicate_with_explicit_owner_column(ownership, campaign_model) -> None:
    query = ownership.apply_ownership_predicate(
        ALICE, select(campaign_model.name), owner_column=campaign_model.owner_id
    )
    assert "test_campaign.owner_id = 'alice'" in _sql(query)


def test_predicate_requires_derivable_owner_column(ownership) -> None:
    with pytest.raises(ValueError):
        ownership.apply_ownership_predicate(ALICE, select(literal(1)))


def test_check_ownership_on_mapping_and_object(ownership) -> None:
    assert ownership.check_ownership(ALICE, {"owner_id": "alice"}).allowed
    assert ownership.check_ownership(ALICE, SimpleNamespace(owner_id="alice")).allowed
    denied = ownership.check_ownership(ALICE, {"owner_id": "bob"}, "campaign")
    assert not denied.allowed
    assert denied.reason.kind is DenialKind.OWNERSHIP
    assert denied.reason.resource_type == "campaign"


def test_row_without_owner_is_denied(ownership) -> None:
    assert not ownership.check_ownership(ALICE, {"name": "orphan"}).allowed


def test_elevated_actor_may_mutate_any_row(ownership) -> None:
    decision = ownership.check_ownership(ROOT, {"owner_id": "bob"})
    assert decision.allowed
    assert decision.elevated is True


def test_assert_ownership_raises(ownership) -> None:
    ownership.assert_ownership(ALICE, {"owner_id": "alice"})
    with pytest.raises(OwnershipDeniedException) as exc_info:
        ownership.assert_ownership(ALICE, SimpleNamespace(owner_id="bob"), "campaign")
    assert "bob" not in str(exc_info.value.to_dict())


def test_assign_owner_overwrites_client_value_on_copy(ownership) -> None:
    draft = {"name": "Spring", "owner_id": "bob"}
    assigned = ownership.assign_owner(ALICE, draft)
    assert assigned == {"name": "Spring", "owner_id": "alice"}
    assert draft["owner_id"] == "bob"


def test_assign_owner_sets_attribute_on_object(ownership) -> None:
    draft = SimpleNamespace(name="Spring", owner_id="bob")
    assert ownership.assign_owner(ALICE, draft) is draft
    assert draft.owner_id == "alice"


def test_elevated_actor_is_still_recorded_as_owner(ownership) -> None:
    assert ownership.assign_owner(ROOT, {"name": "x"})["owner_id"] == "root"


def test_custom_owner_attribute() -> None:
    ownership = OwnershipFilter(owner_attribute="created_by")
    assert ownership.assign_owner(ALICE, {})["created_by"] == "alice"
    assert ownership.check_ownership(ALICE, {"created_by": "alice"}).allowed


def test_strip_owner_drops_owner_from_update_copy(ownership) -> None:
    changes = {"name": "Autumn", "owner_id": "bob"}
    assert ownership.strip_owner(changes) == {"name": "Autumn"}
    assert changes == {"name": "Autumn", "owner_id": "bob"}


def test_strip_owner_uses_configured_attribute() -> None:
    ownership = OwnershipFilter(owner_attribute="created_by")
    assert ownership.strip_owner({"created_by": 7, "owner_id": "x"}) == {"owner_id": "x"}


def test_transient_row_owner_may_be_reassigned(ownership, campaign_model) -> None:
    draft = campaign_model(name="Spring", owner_id="bob")
    ownership.assign_owner(ALICE, draft)
    assert draft.owner_id == "alice"


class _ReportBase(DeclarativeBase):
    pass


class Report(_ReportBase):
    """Row whose owner column is an integer user id."""

    __tablename__ = "report"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    created_by: Mapped[int] = mapped_column(Integer)


@pytest.fixture
def by_creator() -> OwnershipFilter:
    return OwnershipFilter(owner_attribute="created_by")


def test_integer_owner_column_compares_as_integer(by_creator) -> None:
    query = by_creator.apply_ownership_predicate(Actor(id="42"), select(Report))
    assert "report.created_by = 42" in _sql(query)


def test_unconvertible_actor_id_owns_no_integer_rows(by_creator) -> None:
    sql = _sql(by_creator.apply_ownership_predicate(ALICE, select(Report)))
    assert "WHERE" in sql
    assert "created_by =" not in sql


def test_check_ownership_matches_integer_owner(by_creator) -> None:
    assert by_creator.check_ownership(Actor(id="42"), SimpleNamespace(created_by=42)).allowed
    assert not by_creator.check_ownership(Actor(id="7"), SimpleNamespace(created_by=42)).allowed


def test_assign_owner_converts_to_integer_column(by_creator) -> None:
    report = Report(title="Q3")
    by_creator.assign_owner(Actor(id="42"), report)
    assert report.created_by == 42
    with pytest.raises(ValueError):
        by_creator.assign_owner(ALICE, Report(title="Q4"))
