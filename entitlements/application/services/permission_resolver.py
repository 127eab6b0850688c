"""Resolves an actor's effective permission set (implements IPermissionResolver)."""

from __future__ import annotations

from collections.abc import Iterable

from entitlements.application.dtos.role import RoleResult
from entitlements.application.interfaces.repositories import (
    IBindingRepository,
    IGrantRepository,
)
from entitlements.domain.enums import Action
from entitlements.domain.value_objects import PermissionKey

_ACTION_ORDER = {a.value: i for i, a in enumerate(Action)}


def group_by_module(keys: Iterable[str]) -> dict[str, list[str]]:
    """Group permission keys as {module: [actions]}; actions follow Action order.

    Keys that do not parse (legacy rows) are skipped.
    """
    grouped: dict[str, list[str]] = {}
    for key in keys:
        try:
            pk = PermissionKey.parse(key)
        except ValueError:
            continue
        grouped.setdefault(pk.module, []).append(pk.action.value)
    return {
        module: sorted(set(actions), key=_ACTION_ORDER.__getitem__)
        for module, actions in sorted(grouped.items())
    }


class PermissionResolver:
    """Union of grants across an actor's active, unexpired bindings to active roles.

    Reads current state on every call; no memory is kept between calls.
    """

    def __init__(
        self,
        binding_repo: IBindingRepository,
        grant_repo: IGrantRepository,
    ) -> None:
        self.binding_repo = binding_repo
        self.grant_repo = grant_repo

    async def resolve(self, actor_id: str) -> set[str]:
        """Return the effective permission keys; empty when the actor has no bindings."""
        roles = await self.binding_repo.get_active_roles(actor_id)
        return await self.resolve_roles(roles)

    async def resolve_roles(self, roles: Iterable[RoleResult]) -> set[str]:
        """Return the union of active permission keys granted to active roles."""
        role_ids = [r.id for r in roles if r.is_active]
        if not role_ids:
            return set()
        return await self.grant_repo.get_permission_keys_for_roles(role_ids)

    async def resolve_grouped(self, actor_id: str) -> dict[str, list[str]]:
        return group_by_module(await self.resolve(actor_id))
