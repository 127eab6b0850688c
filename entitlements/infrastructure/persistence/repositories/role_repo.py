"""Role repository. Read methods return RoleResult (DTO); entity getters return ORM for writes."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application.dtos.role import RoleResult
from entitlements.domain.enums import RoleTier
from entitlements.domain.exceptions import CatalogConflictException
from entitlements.infrastructure.persistence.models.role import Role
from entitlements.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {"name", "display_name", "description", "level", "is_active"}
)


def role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        name=r.name,
        display_name=r.display_name,
        description=r.description,
        level=r.level,
        tier=RoleTier(r.tier),
        is_system_role=r.is_system_role,
        is_active=r.is_active,
    )


class RoleRepository(BaseRepository[Role]):
    """Role store. Read methods return RoleResult; use get_entity for update/delete.

    tier is written once by create_role and is not in the updatable field set.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def _on_after_create(self, obj: Role) -> None:
        logger.info(
            "Role created: %s (%s) level=%s tier=%s", obj.name, obj.id, obj.level, obj.tier
        )

    async def _on_before_delete(self, obj: Role) -> None:
        logger.info("Role deleted: %s (%s)", obj.name, obj.id)

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
    ) -> RoleResult:
        """Create a role; return read-model DTO."""
        role = Role(
            name=name,
            level=level,
            tier=RoleTier(tier).value,
            display_name=display_name,
            description=description,
            is_system_role=is_system_role,
            is_active=is_active,
        )
        try:
            created = await self.create(role)
        except IntegrityError:
            raise CatalogConflictException("role", "name", name) from None
        return role_to_result(created)

    async def get_entity(self, role_id: str) -> Role | None:
        """Return role ORM by id for update/delete."""
        return await self.get_by_id(role_id)

    async def get_role(self, role_id: str) -> RoleResult | None:
        orm = await self.get_by_id(role_id)
        return role_to_result(orm) if orm else None

    async def get_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def list_roles(
        self, skip: int = 0, limit: int = 100, *, include_inactive: bool = False
    ) -> list[RoleResult]:
        """Return roles, highest level first."""
        q = select(Role)
        if not include_inactive:
            q = q.where(Role.is_active.is_(True))
        q = q.order_by(Role.level.desc(), Role.name).offset(skip).limit(limit)
        result = await self.db.execute(q)
        return [role_to_result(r) for r in result.scalars().all()]

    async def update_role(self, role_id: str, **changes: Any) -> RoleResult | None:
        """Apply changes to a role; None if not found."""
        role = await self.get_entity(role_id)
        if not role:
            return None
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Role fields not updatable: {', '.join(sorted(unknown))}")
        for field, value in changes.items():
            setattr(role, field, value)
        try:
            updated = await self.update(role)
        except IntegrityError:
            if "name" not in changes:
                raise
            raise CatalogConflictException("role", "name", changes["name"]) from None
        return role_to_result(updated)

    async def delete_role(self, role_id: str) -> bool:
        role = await self.get_entity(role_id)
        if not role:
            return False
        await self.delete(role)
        return True
