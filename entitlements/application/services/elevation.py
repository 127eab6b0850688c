"""Elevation classifier: which roles bypass capability checks and ownership filtering."""

from __future__ import annotations

import re
from collections.abc import Iterable

from entitlements.application.dtos.role import RoleResult
from entitlements.domain.enums import RoleTier

_SEPARATORS_RE = re.compile(r"[\s_\-.]+")


def canonical_role_name(name: str) -> str:
    """Fold case and drop separators: 'Super Admin', 'super_admin' -> 'superadmin'."""
    return _SEPARATORS_RE.sub("", name).casefold()


class ElevationClassifier:
    """Derives elevation from a role's tier, with level as a secondary threshold.

    The tier is decided once when the role is created (initial_tier); names are
    never consulted afterwards, so renaming a role cannot change its elevation.
    """

    def __init__(self, threshold: int, elevated_role_names: Iterable[str] = ()) -> None:
        self.threshold = threshold
        self._canonical_names = frozenset(
            canonical_role_name(n) for n in elevated_role_names
        )

    def initial_tier(self, name: str, requested: RoleTier | None = None) -> RoleTier:
        """Tier for a new role: an explicit request wins, else canonical-name match."""
        if requested is not None:
            return requested
        if canonical_role_name(name) in self._canonical_names:
            return RoleTier.ELEVATED
        return RoleTier.STANDARD

    def is_elevated(self, role: RoleResult) -> bool:
        if not role.is_active:
            return False
        return role.tier is RoleTier.ELEVATED or role.level >= self.threshold

    def any_elevated(self, roles: Iterable[RoleResult]) -> bool:
        return any(self.is_elevated(r) for r in roles)
