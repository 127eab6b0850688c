"""DTOs for module and permission catalog use cases."""

from dataclasses import dataclass

from entitlements.domain.value_objects import PermissionKey


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model."""

    id: str
    key: str
    display_name: str
    description: str | None
    module_id: str
    is_active: bool

    @property
    def permission_key(self) -> PermissionKey:
        return PermissionKey.parse(self.key)


@dataclass(frozen=True)
class ModuleResult:
    """Module read-model; permissions is populated only when expanded."""

    id: str
    name: str
    display_name: str
    route: str | None
    order: int
    is_active: bool
    permissions: tuple[PermissionResult, ...] = ()
