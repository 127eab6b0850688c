"""Binding repository: actor-role bindings (single entity responsibility)."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application.dtos.binding import BindingResult
from entitlements.application.dtos.role import RoleResult
from entitlements.domain.exceptions import CatalogConflictException
from entitlements.infrastructure.persistence.models.permission import ActorRoleBinding
from entitlements.infrastructure.persistence.models.role import Role
from entitlements.infrastructure.persistence.repositories.role_repo import role_to_result
from entitlements.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def _binding_to_result(b: ActorRoleBinding) -> BindingResult:
    """Map ORM ActorRoleBinding to application BindingResult."""
    return BindingResult(
        id=b.id,
        actor_id=b.actor_id,
        role_id=b.role_id,
        role_name=b.role_name,
        is_active=b.is_active,
        bound_by=b.bound_by,
        bound_at=ensure_utc(b.bound_at),
        expires_at=ensure_utc(b.expires_at),
        unbound_by=b.unbound_by,
        unbound_at=ensure_utc(b.unbound_at),
    )


class BindingRepository:
    """Actor-role link table only. Bind, unbind and list roles for an actor."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_entity(self, actor_id: str, role_id: str) -> ActorRoleBinding | None:
        result = await self.db.execute(
            select(ActorRoleBinding).where(
                ActorRoleBinding.actor_id == actor_id,
                ActorRoleBinding.role_id == role_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_active_roles(
        self, actor_id: str, at: datetime | None = None
    ) -> list[RoleResult]:
        """Return active roles held through active, unexpired bindings at ``at`` (default now)."""
        now = at or utc_now()
        result = await self.db.execute(
            select(Role)
            .join(ActorRoleBinding, ActorRoleBinding.role_id == Role.id)
            .where(
                ActorRoleBinding.actor_id == actor_id,
                ActorRoleBinding.is_active.is_(True),
                Role.is_active.is_(True),
                or_(
                    ActorRoleBinding.expires_at.is_(None),
                    ActorRoleBinding.expires_at > now,
                ),
            )
            .order_by(Role.level.desc(), Role.name)
        )
        return [role_to_result(r) for r in result.scalars().all()]

    async def get_binding(self, actor_id: str, role_id: str) -> BindingResult | None:
        orm = await self._get_entity(actor_id, role_id)
        return _binding_to_result(orm) if orm else None

    async def list_for_actor(
        self, actor_id: str, *, include_inactive: bool = False
    ) -> list[BindingResult]:
        q = select(ActorRoleBinding).where(ActorRoleBinding.actor_id == actor_id)
        if not include_inactive:
            q = q.where(ActorRoleBinding.is_active.is_(True))
        q = q.order_by(ActorRoleBinding.bound_at)
        result = await self.db.execute(q)
        return [_binding_to_result(b) for b in result.scalars().all()]

    async def create_binding(
        self,
        actor_id: str,
        role_id: str,
        bound_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> BindingResult:
        binding = ActorRoleBinding(
            actor_id=actor_id,
            role_id=role_id,
            role_name=await self._role_name(role_id),
            bound_by=bound_by,
            expires_at=expires_at,
            is_active=True,
        )
        try:
            self.db.add(binding)
            await self.db.flush()
            await self.db.refresh(binding)
        except IntegrityError:
            raise CatalogConflictException("binding", "role_id", role_id) from None
        logger.info("Role %s bound to actor %s by %s", role_id, actor_id, bound_by)
        return _binding_to_result(binding)

    async def reactivate_binding(
        self,
        actor_id: str,
        role_id: str,
        bound_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> BindingResult | None:
        """Flip an existing binding back to active with fresh bound_* fields."""
        binding = await self._get_entity(actor_id, role_id)
        if not binding:
            return None
        binding.is_active = True
        binding.role_name = await self._role_name(role_id)
        binding.bound_by = bound_by
        binding.bound_at = utc_now()
        binding.expires_at = expires_at
        binding.unbound_by = None
        binding.unbound_at = None
        await self.db.flush()
        await self.db.refresh(binding)
        logger.info("Role %s rebound to actor %s by %s", role_id, actor_id, bound_by)
        return _binding_to_result(binding)

    async def deactivate_binding(
        self, actor_id: str, role_id: str, unbound_by: str | None = None
    ) -> BindingResult | None:
        """Mark the binding inactive; the row is kept for history."""
        binding = await self._get_entity(actor_id, role_id)
        if not binding or not binding.is_active:
            return None
        binding.is_active = False
        binding.unbound_by = unbound_by
        binding.unbound_at = utc_now()
        await self.db.flush()
        await self.db.refresh(binding)
        logger.info("Role %s unbound from actor %s by %s", role_id, actor_id, unbound_by)
        return _binding_to_result(binding)

    async def count_active_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(ActorRoleBinding)
            .where(
                ActorRoleBinding.role_id == role_id,
                ActorRoleBinding.is_active.is_(True),
            )
        )
        return int(result.scalar_one())

    async def detach_inactive_for_role(self, role_id: str) -> int:
        """Null role_id on historical bindings so the role row can be deleted.

        The rows stay, still naming the role through role_name.
        """
        result = await self.db.execute(
            update(ActorRoleBinding)
            .where(
                ActorRoleBinding.role_id == role_id,
                ActorRoleBinding.is_active.is_(False),
            )
            .values(role_id=None)
        )
        return result.rowcount or 0

    async def _role_name(self, role_id: str) -> str | None:
        return await self.db.scalar(select(Role.name).where(Role.id == role_id))
