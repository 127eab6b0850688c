"""Repository interfaces (ports) for the application layer.

Protocols define the store contract that the resolver, the decision point,
and the administration services depend on (DIP). Read methods return DTOs.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol

from entitlements.application.dtos import (
    BindingResult,
    ModuleResult,
    PermissionResult,
    RoleResult,
)


class IModuleRepository(Protocol):
    """Module registry."""

    async def create_module(
        self,
        name: str,
        display_name: str,
        route: str | None = None,
        order: int = 0,
        *,
        is_active: bool = True,
    ) -> ModuleResult: ...

    async def get_module(self, module_id: str) -> ModuleResult | None: ...

    async def get_by_name(self, name: str) -> ModuleResult | None: ...

    async def list_modules(self, *, include_inactive: bool = False) -> list[ModuleResult]: ...

    async def update_module(self, module_id: str, **changes: Any) -> ModuleResult | None: ...

    async def delete_module(self, module_id: str) -> bool: ...


class IPermissionRepository(Protocol):
    """Permission catalog."""

    async def create_permission(
        self,
        key: str,
        display_name: str,
        module_id: str,
        description: str | None = None,
        *,
        is_active: bool = True,
    ) -> PermissionResult: ...

    async def get_permission(self, permission_id: str) -> PermissionResult | None: ...

    async def get_by_key(self, key: str) -> PermissionResult | None: ...

    async def get_by_keys(self, keys: Iterable[str]) -> list[PermissionResult]: ...

    async def list_permissions(
        self, module_id: str | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]: ...

    async def count_for_module(self, module_id: str, *, active_only: bool = False) -> int: ...

    async def delete_permission(self, permission_id: str) -> bool: ...


class IRoleRepository(Protocol):
    """Role store."""

    async def create_role(
        self,
        name: str,
        level: int,
        tier: str,
        display_name: str | None = None,
        description: str | None = None,
        *,
        is_system_role: bool = False,
        is_active: bool = True,
    ) -> RoleResult: ...

    async def get_role(self, role_id: str) -> RoleResult | None: ...

    async def get_by_name(self, name: str) -> RoleResult | None: ...

    async def list_roles(
        self, skip: int = 0, limit: int = 100, *, include_inactive: bool = False
    ) -> list[RoleResult]: ...

    async def update_role(self, role_id: str, **changes: Any) -> RoleResult | None: ...

    async def delete_role(self, role_id: str) -> bool: ...


class IGrantRepository(Protocol):
    """Grant table (role-permission pairs)."""

    async def get_permission_keys_for_roles(self, role_ids: Iterable[str]) -> set[str]: ...

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]: ...

    async def replace_for_role(
        self, role_id: str, permission_ids: Iterable[str], granted_by: str | None = None
    ) -> None: ...

    async def delete_for_role(self, role_id: str) -> int: ...

    async def delete_for_permission(self, permission_id: str) -> int: ...


class IBindingRepository(Protocol):
    """Actor-role bindings."""

    async def get_active_roles(
        self, actor_id: str, at: datetime | None = None
    ) -> list[RoleResult]: ...

    async def get_binding(self, actor_id: str, role_id: str) -> BindingResult | None: ...

    async def list_for_actor(
        self, actor_id: str, *, include_inactive: bool = False
    ) -> list[BindingResult]: ...

    async def create_binding(
        self,
        actor_id: str,
        role_id: str,
        bound_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> BindingResult: ...

    async def reactivate_binding(
        self,
        actor_id: str,
        role_id: str,
        bound_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> BindingResult | None: ...

    async def deactivate_binding(
        self, actor_id: str, role_id: str, unbound_by: str | None = None
    ) -> BindingResult | None: ...

    async def count_active_for_role(self, role_id: str) -> int: ...

    async def detach_inactive_for_role(self, role_id: str) -> int: ...
