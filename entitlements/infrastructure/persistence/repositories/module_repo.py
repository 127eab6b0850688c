"""Module repository. Read methods return ModuleResult (DTO); entity getters return ORM for writes."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application.dtos.catalog import ModuleResult
from entitlements.domain.exceptions import CatalogConflictException
from entitlements.infrastructure.persistence.models.module import Module
from entitlements.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

# DTO field name -> column attribute
_UPDATABLE_FIELDS = {
    "name": "name",
    "display_name": "display_name",
    "route": "route",
    "order": "order_index",
    "is_active": "is_active",
}


def _module_to_result(m: Module) -> ModuleResult:
    """Map ORM Module to application ModuleResult."""
    return ModuleResult(
        id=m.id,
        name=m.name,
        display_name=m.display_name,
        route=m.route,
        order=m.order_index,
        is_active=m.is_active,
    )


class ModuleRepository(BaseRepository[Module]):
    """Module registry. Read methods return ModuleResult; use get_entity for update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Module)

    async def _on_after_create(self, obj: Module) -> None:
        logger.info("Module created: %s (%s)", obj.name, obj.id)

    async def _on_before_delete(self, obj: Module) -> None:
        logger.info("Module deleted: %s (%s)", obj.name, obj.id)

    async def create_module(
        self,
        name: str,
        display_name: str,
        route: str | None = None,
        order: int = 0,
        *,
        is_active: bool = True,
    ) -> ModuleResult:
        """Create a module; return read-model DTO."""
        module = Module(
            name=name,
            display_name=display_name,
            route=route,
            order_index=order,
            is_active=is_active,
        )
        try:
            created = await self.create(module)
        except IntegrityError:
            raise CatalogConflictException("module", "name", name) from None
        return _module_to_result(created)

    async def get_entity(self, module_id: str) -> Module | None:
        """Return module ORM by id for update/delete."""
        return await self.get_by_id(module_id)

    async def get_module(self, module_id: str) -> ModuleResult | None:
        orm = await self.get_by_id(module_id)
        return _module_to_result(orm) if orm else None

    async def get_by_name(self, name: str) -> ModuleResult | None:
        result = await self.db.execute(select(Module).where(Module.name == name))
        row = result.scalar_one_or_none()
        return _module_to_result(row) if row else None

    async def list_modules(self, *, include_inactive: bool = False) -> list[ModuleResult]:
        """Return modules ordered by display order, then name."""
        q = select(Module)
        if not include_inactive:
            q = q.where(Module.is_active.is_(True))
        q = q.order_by(Module.order_index, Module.name)
        result = await self.db.execute(q)
        return [_module_to_result(m) for m in result.scalars().all()]

    async def update_module(self, module_id: str, **changes: Any) -> ModuleResult | None:
        """Apply changes (DTO field names) to a module; None if not found."""
        module = await self.get_entity(module_id)
        if not module:
            return None
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Module fields not updatable: {', '.join(sorted(unknown))}")
        for field, value in changes.items():
            setattr(module, _UPDATABLE_FIELDS[field], value)
        try:
            updated = await self.update(module)
        except IntegrityError:
            if "name" not in changes:
                raise
            raise CatalogConflictException("module", "name", changes["name"]) from None
        return _module_to_result(updated)

    async def delete_module(self, module_id: str) -> bool:
        module = await self.get_entity(module_id)
        if not module:
            return False
        await self.delete(module)
        return True
