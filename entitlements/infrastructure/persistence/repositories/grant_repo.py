"""Grant repository: role-permission pairs (single entity responsibility)."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application.dtos.catalog import PermissionResult
from entitlements.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from entitlements.infrastructure.persistence.models.role import Role
from entitlements.infrastructure.persistence.repositories.permission_repo import (
    permission_to_result,
)

logger = logging.getLogger(__name__)


class GrantRepository:
    """Grant table only. Query and replace the permission set of a role."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permission_keys_for_roles(self, role_ids: Iterable[str]) -> set[str]:
        """Return keys of active permissions granted to any of role_ids."""
        ids = list(role_ids)
        if not ids:
            return set()
        result = await self.db.execute(
            select(Permission.key)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(
                RolePermission.role_id.in_(ids),
                Permission.is_active.is_(True),
            )
            .distinct()
        )
        return set(result.scalars().all())

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.key)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def replace_for_role(
        self, role_id: str, permission_ids: Iterable[str], granted_by: str | None = None
    ) -> None:
        """Delete every grant of role_id then insert one per permission id.

        Runs inside the caller's transaction; a failure part-way leaves the
        previous grant set in place once the transaction rolls back. The role
        row is locked first (SELECT ... FOR UPDATE) so concurrent replaces for
        one role run one after the other and the last commit wins.
        """
        ids = list(dict.fromkeys(permission_ids))
        await self.db.execute(select(Role.id).where(Role.id == role_id).with_for_update())
        await self.db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        self.db.add_all(
            RolePermission(role_id=role_id, permission_id=pid, granted_by=granted_by)
            for pid in ids
        )
        await self.db.flush()
        logger.info("Grants replaced for role %s (%s permissions)", role_id, len(ids))

    async def delete_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        return result.rowcount or 0

    async def delete_for_permission(self, permission_id: str) -> int:
        result = await self.db.execute(
            delete(RolePermission).where(RolePermission.permission_id == permission_id)
        )
        return result.rowcount or 0
