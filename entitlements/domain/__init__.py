"""Domain layer: value objects, enums, decisions, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from entitlements.domain.decisions import AccessDecision, DenialKind, DenialReason
from entitlements.domain.enums import Action, RoleTier
from entitlements.domain.exceptions import (
    AuthenticationException,
    CapabilityDeniedException,
    CatalogConflictException,
    CatalogInUseException,
    EntitlementException,
    OwnershipDeniedException,
    ResourceNotFoundException,
    SystemRoleProtectedException,
    ValidationException,
)
from entitlements.domain.value_objects import PermissionKey

__all__ = [
    "AccessDecision",
    "Action",
    "AuthenticationException",
    "CapabilityDeniedException",
    "CatalogConflictException",
    "CatalogInUseException",
    "DenialKind",
    "DenialReason",
    "EntitlementException",
    "OwnershipDeniedException",
    "PermissionKey",
    "ResourceNotFoundException",
    "RoleTier",
    "SystemRoleProtectedException",
    "ValidationException",
]
