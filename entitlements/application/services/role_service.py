"""Role application service: role CRUD and atomic grant replacement."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from entitlements.application.dtos.catalog import PermissionResult
from entitlements.application.dtos.role import RoleResult
from entitlements.application.interfaces.repositories import (
    IBindingRepository,
    IGrantRepository,
    IPermissionRepository,
    IRoleRepository,
)
from entitlements.application.interfaces.services import IAfterCommit
from entitlements.application.services.authorization_service import (
    AuthorizationService,
)
from entitlements.application.services.elevation import ElevationClassifier
from entitlements.domain.enums import RoleTier
from entitlements.domain.exceptions import (
    CatalogConflictException,
    CatalogInUseException,
    ResourceNotFoundException,
    SystemRoleProtectedException,
    ValidationException,
)
from entitlements.domain.value_objects import PermissionKey, validate_role_level

logger = logging.getLogger(__name__)


class RoleService:
    """Create, edit and delete roles; replace a role's grant set in one transaction.

    All writes are expected to run on a session from get_db_transactional so
    that multi-statement operations commit or roll back together. With
    after_commit set, cache invalidation is deferred until that commit.
    """

    def __init__(
        self,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        grant_repo: IGrantRepository,
        binding_repo: IBindingRepository,
        classifier: ElevationClassifier,
        authorization: AuthorizationService | None = None,
        after_commit: IAfterCommit | None = None,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._grant_repo = grant_repo
        self._binding_repo = binding_repo
        self._classifier = classifier
        self._authorization = authorization
        self._after_commit = after_commit

    async def create_role(
        self,
        name: str,
        level: int = 1,
        display_name: str | None = None,
        description: str | None = None,
        *,
        tier: RoleTier | None = None,
        is_system_role: bool = False,
        is_active: bool = True,
    ) -> RoleResult:
        """Create a role; tier is fixed here and never changed afterwards.

        Raises:
            ValidationException: If name is blank or level is out of range.
            CatalogConflictException: If a role with the same name exists.
        """
        name = _clean_name(name)
        _check_level(level)
        if await self._role_repo.get_by_name(name):
            raise CatalogConflictException("role", "name", name)
        return await self._role_repo.create_role(
            name=name,
            level=level,
            tier=self._classifier.initial_tier(name, tier).value,
            display_name=display_name,
            description=description,
            is_system_role=is_system_role,
            is_active=is_active,
        )

    async def get_role(self, role_id: str) -> RoleResult:
        role = await self._role_repo.get_role(role_id)
        if not role:
            raise ResourceNotFoundException("role", role_id)
        return role

    async def list_roles(
        self, skip: int = 0, limit: int = 100, *, include_inactive: bool = False
    ) -> list[RoleResult]:
        return await self._role_repo.list_roles(
            skip, limit, include_inactive=include_inactive
        )

    async def update_role(self, role_id: str, **changes: Any) -> RoleResult:
        """Apply name/display_name/description/level/is_active changes.

        System roles cannot be renamed.
        """
        role = await self.get_role(role_id)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"])
            if changes["name"] != role.name:
                if role.is_system_role:
                    raise SystemRoleProtectedException(role_id)
                if await self._role_repo.get_by_name(changes["name"]):
                    raise CatalogConflictException("role", "name", changes["name"])
        if "level" in changes:
            _check_level(changes["level"])
        try:
            updated = await self._role_repo.update_role(role_id, **changes)
        except ValueError as e:
            raise ValidationException(str(e)) from e
        if updated is None:
            raise ResourceNotFoundException("role", role_id)
        logger.info("Role updated: %s (%s) fields=%s", updated.name, role_id, sorted(changes))
        await self._invalidate()
        return updated

    async def delete_role(self, role_id: str) -> None:
        """Delete a role and its grants; historical bindings are kept, detached from it.

        Raises:
            SystemRoleProtectedException: If the role is a system role.
            CatalogInUseException: If any active binding references the role.
        """
        role = await self.get_role(role_id)
        if role.is_system_role:
            raise SystemRoleProtectedException(role_id)
        active = await self._binding_repo.count_active_for_role(role_id)
        if active:
            raise CatalogInUseException(
                "role",
                role_id,
                f"role has {active} active binding(s)",
                active_bindings=active,
            )
        await self._grant_repo.delete_for_role(role_id)
        await self._binding_repo.detach_inactive_for_role(role_id)
        await self._role_repo.delete_role(role_id)
        await self._invalidate()

    async def get_role_permissions(self, role_id: str) -> list[PermissionResult]:
        await self.get_role(role_id)
        return await self._grant_repo.get_permissions_for_role(role_id)

    async def replace_role_permissions(
        self,
        role_id: str,
        permission_keys: Iterable[str],
        granted_by: str | None = None,
    ) -> list[PermissionResult]:
        """Replace the role's grant set with exactly permission_keys (last writer wins).

        Every key is validated before any grant is touched, so an invalid
        request leaves the previous set intact.

        Raises:
            ResourceNotFoundException: If the role does not exist.
            ValidationException: If a key is malformed or not in the catalog.
        """
        await self.get_role(role_id)
        keys: list[str] = []
        for raw in permission_keys:
            try:
                keys.append(PermissionKey.parse(raw).key)
            except ValueError as e:
                raise ValidationException(str(e), field="permissions") from e
        keys = list(dict.fromkeys(keys))
        found = await self._permission_repo.get_by_keys(keys)
        by_key = {p.key: p for p in found}
        unknown = [k for k in keys if k not in by_key]
        if unknown:
            raise ValidationException(
                f"Unknown permission key(s): {', '.join(unknown)}", field="permissions"
            )
        await self._grant_repo.replace_for_role(
            role_id, [by_key[k].id for k in keys], granted_by=granted_by
        )
        await self._invalidate()
        return await self._grant_repo.get_permissions_for_role(role_id)

    async def _invalidate(self) -> None:
        if self._authorization is None:
            return
        if self._after_commit is not None:
            self._after_commit(self._authorization.invalidate_all)
        else:
            await self._authorization.invalidate_all()


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationException("Role name must be a non-empty string", field="name")
    return cleaned


def _check_level(level: int) -> None:
    try:
        validate_role_level(level)
    except ValueError as e:
        raise ValidationException(str(e), field="level") from e
