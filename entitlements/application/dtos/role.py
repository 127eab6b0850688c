"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass

from entitlements.domain.enums import RoleTier


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_role, list_roles, create_role, etc.)."""

    id: str
    name: str
    display_name: str | None
    description: str | None
    level: int
    tier: RoleTier
    is_system_role: bool
    is_active: bool
