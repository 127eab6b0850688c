"""Permission repository. Read methods return PermissionResult (DTO)."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application.dtos.catalog import PermissionResult
from entitlements.domain.exceptions import CatalogConflictException
from entitlements.infrastructure.persistence.models.permission import Permission
from entitlements.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        key=p.key,
        display_name=p.display_name,
        description=p.description,
        module_id=p.module_id,
        is_active=p.is_active,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Permission catalog. Keys are validated by the service before they reach here."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def _on_after_create(self, obj: Permission) -> None:
        logger.info("Permission created: %s (%s)", obj.key, obj.id)

    async def _on_before_delete(self, obj: Permission) -> None:
        logger.info("Permission deleted: %s (%s)", obj.key, obj.id)

    async def create_permission(
        self,
        key: str,
        display_name: str,
        module_id: str,
        description: str | None = None,
        *,
        is_active: bool = True,
    ) -> PermissionResult:
        """Create a permission; return read-model DTO."""
        permission = Permission(
            key=key,
            display_name=display_name,
            module_id=module_id,
            description=description,
            is_active=is_active,
        )
        try:
            created = await self.create(permission)
        except IntegrityError:
            raise CatalogConflictException("permission", "key", key) from None
        return permission_to_result(created)

    async def get_permission(self, permission_id: str) -> PermissionResult | None:
        orm = await self.get_by_id(permission_id)
        return permission_to_result(orm) if orm else None

    async def get_by_key(self, key: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.key == key))
        row = result.scalar_one_or_none()
        return permission_to_result(row) if row else None

    async def get_by_keys(self, keys: Iterable[str]) -> list[PermissionResult]:
        """Return permissions whose key is in keys (missing keys are simply absent)."""
        wanted = list(set(keys))
        if not wanted:
            return []
        result = await self.db.execute(
            select(Permission).where(Permission.key.in_(wanted))
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def list_permissions(
        self, module_id: str | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]:
        q = select(Permission)
        if module_id is not None:
            q = q.where(Permission.module_id == module_id)
        if not include_inactive:
            q = q.where(Permission.is_active.is_(True))
        q = q.order_by(Permission.key)
        result = await self.db.execute(q)
        return [permission_to_result(p) for p in result.scalars().all()]

    async def count_for_module(self, module_id: str, *, active_only: bool = False) -> int:
        """Return how many permissions reference module_id."""
        q = select(func.count()).select_from(Permission).where(
            Permission.module_id == module_id
        )
        if active_only:
            q = q.where(Permission.is_active.is_(True))
        result = await self.db.execute(q)
        return int(result.scalar_one())

    async def delete_permission(self, permission_id: str) -> bool:
        permission = await self.get_by_id(permission_id)
        if not permission:
            return False
        await self.delete(permission)
        return True
