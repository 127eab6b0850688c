"""Catalog application service: module registry and permission catalog administration."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from entitlements.application.dtos.catalog import ModuleResult, PermissionResult
from entitlements.application.interfaces.repositories import (
    IGrantRepository,
    IModuleRepository,
    IPermissionRepository,
)
from entitlements.application.interfaces.services import IAfterCommit
from entitlements.application.services.authorization_service import (
    AuthorizationService,
)
from entitlements.domain.enums import Action
from entitlements.domain.exceptions import (
    CatalogConflictException,
    CatalogInUseException,
    ResourceNotFoundException,
    ValidationException,
)
from entitlements.domain.value_objects import PermissionKey, validate_module_name

logger = logging.getLogger(__name__)


class CatalogService:
    """Modules and permissions.

    A permission always points at an existing, active module; a module's name
    is frozen and it cannot be deactivated or deleted while permissions
    reference it.
    """

    def __init__(
        self,
        module_repo: IModuleRepository,
        permission_repo: IPermissionRepository,
        grant_repo: IGrantRepository,
        authorization: AuthorizationService | None = None,
        after_commit: IAfterCommit | None = None,
    ) -> None:
        self._module_repo = module_repo
        self._permission_repo = permission_repo
        self._grant_repo = grant_repo
        self._authorization = authorization
        self._after_commit = after_commit

    # Modules

    async def create_module(
        self,
        name: str,
        display_name: str,
        route: str | None = None,
        order: int = 0,
        *,
        is_active: bool = True,
    ) -> ModuleResult:
        _check_module_name(name)
        if await self._module_repo.get_by_name(name):
            raise CatalogConflictException("module", "name", name)
        return await self._module_repo.create_module(
            name, display_name, route, order, is_active=is_active
        )

    async def get_module(self, module_id: str) -> ModuleResult:
        module = await self._module_repo.get_module(module_id)
        if not module:
            raise ResourceNotFoundException("module", module_id)
        return module

    async def list_modules(
        self, *, expand_permissions: bool = False, include_inactive: bool = False
    ) -> list[ModuleResult]:
        """Return modules; with expand_permissions each carries its permissions."""
        modules = await self._module_repo.list_modules(include_inactive=include_inactive)
        if not expand_permissions:
            return modules
        permissions = await self._permission_repo.list_permissions(
            include_inactive=include_inactive
        )
        by_module: dict[str, list[PermissionResult]] = {}
        for p in permissions:
            by_module.setdefault(p.module_id, []).append(p)
        return [
            dataclasses.replace(m, permissions=tuple(by_module.get(m.id, ())))
            for m in modules
        ]

    async def update_module(self, module_id: str, **changes: Any) -> ModuleResult:
        module = await self.get_module(module_id)
        renaming = "name" in changes and changes["name"] != module.name
        deactivating = changes.get("is_active") is False and module.is_active
        if renaming:
            _check_module_name(changes["name"])
        if renaming or deactivating:
            referenced = await self._permission_repo.count_for_module(module_id)
            if referenced:
                raise CatalogInUseException(
                    "module",
                    module_id,
                    f"module is referenced by {referenced} permission(s)",
                    permissions=referenced,
                )
        if renaming and await self._module_repo.get_by_name(changes["name"]):
            raise CatalogConflictException("module", "name", changes["name"])
        try:
            updated = await self._module_repo.update_module(module_id, **changes)
        except ValueError as e:
            raise ValidationException(str(e)) from e
        if updated is None:
            raise ResourceNotFoundException("module", module_id)
        logger.info("Module updated: %s (%s) fields=%s", updated.name, module_id, sorted(changes))
        return updated

    async def delete_module(self, module_id: str) -> None:
        await self.get_module(module_id)
        referenced = await self._permission_repo.count_for_module(module_id)
        if referenced:
            raise CatalogInUseException(
                "module",
                module_id,
                f"module is referenced by {referenced} permission(s)",
                permissions=referenced,
            )
        await self._module_repo.delete_module(module_id)

    # Permissions

    async def create_permission(
        self,
        module_id: str,
        action: Action | str,
        display_name: str | None = None,
        description: str | None = None,
        *,
        is_active: bool = True,
    ) -> PermissionResult:
        """Create the permission '<module>_<action>' in an active module.

        Raises:
            ValidationException: If the module is missing/inactive or the action is unknown.
            CatalogConflictException: If the key already exists.
        """
        module = await self._module_repo.get_module(module_id)
        if not module or not module.is_active:
            raise ValidationException(
                f"Permission must belong to an existing, active module: {module_id}",
                field="module_id",
            )
        try:
            pk = PermissionKey(module=module.name, action=action)
        except ValueError as e:
            raise ValidationException(str(e), field="action") from e
        if await self._permission_repo.get_by_key(pk.key):
            raise CatalogConflictException("permission", "key", pk.key)
        return await self._permission_repo.create_permission(
            key=pk.key,
            display_name=display_name or f"{pk.action.value.title()} {module.display_name}",
            module_id=module.id,
            description=description,
            is_active=is_active,
        )

    async def get_permission(self, permission_id: str) -> PermissionResult:
        permission = await self._permission_repo.get_permission(permission_id)
        if not permission:
            raise ResourceNotFoundException("permission", permission_id)
        return permission

    async def list_permissions(
        self, module_id: str | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]:
        return await self._permission_repo.list_permissions(
            module_id, include_inactive=include_inactive
        )

    async def delete_permission(self, permission_id: str) -> None:
        """Delete a permission and every grant that references it."""
        await self.get_permission(permission_id)
        removed = await self._grant_repo.delete_for_permission(permission_id)
        await self._permission_repo.delete_permission(permission_id)
        logger.info("Permission %s removed with %s grant(s)", permission_id, removed)
        await self._invalidate()

    async def _invalidate(self) -> None:
        if self._authorization is None:
            return
        if self._after_commit is not None:
            self._after_commit(self._authorization.invalidate_all)
        else:
            await self._authorization.invalidate_all()


def _check_module_name(name: str) -> None:
    try:
        validate_module_name(name)
    except ValueError as e:
        raise ValidationException(str(e), field="name") from e
