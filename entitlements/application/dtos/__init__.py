"""Read-model DTOs returned by repositories and services (no ORM dependency)."""

from entitlements.application.dtos.actor import Actor
from entitlements.application.dtos.binding import BindingResult
from entitlements.application.dtos.catalog import ModuleResult, PermissionResult
from entitlements.application.dtos.role import RoleResult

__all__ = [
    "Actor",
    "BindingResult",
    "ModuleResult",
    "PermissionResult",
    "RoleResult",
]
