"""Access decisions returned by the capability and ownership gates.

A decision is a plain value: callers that prefer exceptions use
AccessDecision.raise_if_denied(), which converts the denial reason into the
matching domain exception.
"""

from dataclasses import dataclass
from enum import Enum

from entitlements.domain.exceptions import (
    CapabilityDeniedException,
    EntitlementException,
    ModuleAccessDeniedException,
    OwnershipDeniedException,
)


class DenialKind(str, Enum):
    """Which gate denied the request."""

    CAPABILITY = "capability"
    MODULE = "module"
    OWNERSHIP = "ownership"


@dataclass(frozen=True)
class DenialReason:
    """Structured reason for a Deny; safe to show to the actor."""

    kind: DenialKind
    required_permission: str | None = None
    user_role: str | None = None
    available_actions: tuple[str, ...] = ()
    suggestion: str | None = None
    resource_type: str | None = None
    required_module: str | None = None

    @classmethod
    def capability(
        cls,
        required_permission: str,
        user_role: str,
        available_actions: list[str] | tuple[str, ...],
        suggestion: str,
    ) -> "DenialReason":
        return cls(
            kind=DenialKind.CAPABILITY,
            required_permission=required_permission,
            user_role=user_role,
            available_actions=tuple(available_actions),
            suggestion=suggestion,
        )

    @classmethod
    def module_access(
        cls, required_module: str, user_role: str, suggestion: str
    ) -> "DenialReason":
        return cls(
            kind=DenialKind.MODULE,
            required_module=required_module,
            user_role=user_role,
            suggestion=suggestion,
        )

    @classmethod
    def ownership(cls, resource_type: str | None = None) -> "DenialReason":
        return cls(kind=DenialKind.OWNERSHIP, resource_type=resource_type)

    def to_exception(self) -> EntitlementException:
        """Return the domain exception that carries this reason."""
        if self.kind is DenialKind.OWNERSHIP:
            return OwnershipDeniedException(self.resource_type)
        if self.kind is DenialKind.MODULE:
            return ModuleAccessDeniedException(
                required_module=self.required_module or "",
                user_role=self.user_role or "",
                suggestion=self.suggestion or "",
            )
        return CapabilityDeniedException(
            required_permission=self.required_permission or "",
            user_role=self.user_role or "",
            available_actions=list(self.available_actions),
            suggestion=self.suggestion or "",
        )


@dataclass(frozen=True)
class AccessDecision:
    """Allow or Deny(reason). ``elevated`` marks an allow granted by elevation bypass."""

    allowed: bool
    reason: DenialReason | None = None
    elevated: bool = False

    @classmethod
    def allow(cls, *, elevated: bool = False) -> "AccessDecision":
        return cls(allowed=True, elevated=elevated)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AccessDecision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed

    def raise_if_denied(self) -> None:
        """Raise the matching domain exception when this decision is a Deny."""
        if not self.allowed and self.reason is not None:
            raise self.reason.to_exception()
