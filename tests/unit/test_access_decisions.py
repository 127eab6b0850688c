"""Tests for AccessDecision and DenialReason."""

import pytest

from entitlements.domain.decisions import AccessDecision, DenialKind, DenialReason
from entitlements.domain.exceptions import (
    CapabilityDeniedException,
    ModuleAccessDeniedException,
    OwnershipDeniedException,
)


def test_allow_is_truthy_and_does_not_raise() -> None:
    decision = AccessDecision.allow()
    assert decision
    assert decision.reason is None
    assert decision.elevated is False
    decision.raise_if_denied()


def test_elevated_allow_is_marked() -> None:
    assert AccessDecision.allow(elevated=True).elevated is True


def test_capability_deny_raises_capability_denied() -> None:
    reason = DenialReason.capability("campaigns_delete", "Manager", ["read"], "ask")
    decision = AccessDecision.deny(reason)
    assert not decision
    assert reason.kind is DenialKind.CAPABILITY
    assert reason.available_actions == ("read",)
    with pytest.raises(CapabilityDeniedException) as exc_info:
        decision.raise_if_denied()
    assert exc_info.value.details["availableActions"] == ["read"]
    assert exc_info.value.details["userRole"] == "Manager"


def test_ownership_deny_raises_ownership_denied() -> None:
    decision = AccessDecision.deny(DenialReason.ownership("campaign"))
    with pytest.raises(OwnershipDeniedException) as exc_info:
        decision.raise_if_denied()
    assert exc_info.value.details["resourceType"] == "campaign"


def test_module_deny_raises_module_access_denied() -> None:
    reason = DenialReason.module_access("reports", "Viewer", "ask")
    assert reason.kind is DenialKind.MODULE
    exc = reason.to_exception()
    assert isinstance(exc, ModuleAccessDeniedException)
    assert exc.error_code == "CAPABILITY_DENIED"
    assert exc.details["requiredModule"] == "reports"
    assert exc.details["availableActions"] == []


def test_capability_and_ownership_denials_share_status_class() -> None:
    """Both kinds surface with distinct codes but the same 403 body shape."""
    capability = DenialReason.capability("cards_update", "Viewer", [], "ask").to_exception()
    ownership = DenialReason.ownership().to_exception()
    assert capability.error_code != ownership.error_code
    assert set(capability.to_dict()) == set(ownership.to_dict())
