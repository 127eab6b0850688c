"""Binding application service: bind and unbind actors to roles."""

from __future__ import annotations

from datetime import datetime
from functools import partial

from entitlements.application.dtos.binding import BindingResult
from entitlements.application.interfaces.repositories import (
    IBindingRepository,
    IRoleRepository,
)
from entitlements.application.interfaces.services import IAfterCommit
from entitlements.application.services.authorization_service import (
    AuthorizationService,
)
from entitlements.domain.exceptions import (
    CatalogConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from entitlements.shared.utils.datetime import ensure_utc, utc_now


class BindingService:
    """Actor-role bindings. Unbinding deactivates the row; re-binding reactivates it."""

    def __init__(
        self,
        binding_repo: IBindingRepository,
        role_repo: IRoleRepository,
        authorization: AuthorizationService | None = None,
        after_commit: IAfterCommit | None = None,
    ) -> None:
        self._binding_repo = binding_repo
        self._role_repo = role_repo
        self._authorization = authorization
        self._after_commit = after_commit

    async def bind(
        self,
        actor_id: str,
        role_id: str,
        bound_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> BindingResult:
        """Bind role_id to actor_id, reactivating a previous binding if one exists.

        Raises:
            ResourceNotFoundException: If the role does not exist.
            ValidationException: If the role is inactive or expires_at is in the past.
            CatalogConflictException: If an active, unexpired binding already exists.
        """
        role = await self._role_repo.get_role(role_id)
        if not role:
            raise ResourceNotFoundException("role", role_id)
        if not role.is_active:
            raise ValidationException(f"Role {role.name} is inactive", field="role_id")
        now = utc_now()
        expires_at = ensure_utc(expires_at)
        if expires_at is not None and expires_at <= now:
            raise ValidationException("expires_at must be in the future", field="expires_at")

        existing = await self._binding_repo.get_binding(actor_id, role_id)
        if existing is None:
            binding = await self._binding_repo.create_binding(
                actor_id, role_id, bound_by=bound_by, expires_at=expires_at
            )
        elif existing.is_active and (
            existing.expires_at is None or existing.expires_at > now
        ):
            raise CatalogConflictException("binding", "role_id", role_id)
        else:
            binding = await self._binding_repo.reactivate_binding(
                actor_id, role_id, bound_by=bound_by, expires_at=expires_at
            )
        await self._invalidate(actor_id)
        return binding

    async def unbind(
        self, actor_id: str, role_id: str, unbound_by: str | None = None
    ) -> BindingResult:
        """Deactivate the binding; the row is kept for history."""
        binding = await self._binding_repo.deactivate_binding(
            actor_id, role_id, unbound_by=unbound_by
        )
        if binding is None:
            raise ResourceNotFoundException("binding", f"{actor_id}/{role_id}")
        await self._invalidate(actor_id)
        return binding

    async def list_bindings(
        self, actor_id: str, *, include_inactive: bool = False
    ) -> list[BindingResult]:
        return await self._binding_repo.list_for_actor(
            actor_id, include_inactive=include_inactive
        )

    async def _invalidate(self, actor_id: str) -> None:
        if self._authorization is None:
            return
        if self._after_commit is not None:
            self._after_commit(partial(self._authorization.invalidate_actor_cache, actor_id))
        else:
            await self._authorization.invalidate_actor_cache(actor_id)
