"""Access decision point: capability checks with elevation short-circuit and optional caching."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from entitlements.application.dtos.actor import Actor
from entitlements.application.interfaces.repositories import IBindingRepository
from entitlements.application.interfaces.services import (
    ICacheService,
    IPermissionResolver,
)
from entitlements.application.services.elevation import ElevationClassifier
from entitlements.application.services.permission_resolver import group_by_module
from entitlements.domain.decisions import AccessDecision, DenialReason
from entitlements.domain.exceptions import ValidationException
from entitlements.domain.value_objects import PermissionKey, validate_module_name

_CACHE_PREFIX = "permission"


class AuthorizationService:
    """Centralized capability checking.

    Elevated actors are allowed without consulting the resolver. For everyone
    else the effective permission set is read from the store on every call,
    or from the short-TTL cache when one is configured.
    """

    def __init__(
        self,
        binding_repo: IBindingRepository,
        permission_resolver: IPermissionResolver,
        classifier: ElevationClassifier,
        *,
        suggestion: str,
        cache: ICacheService | None = None,
        cache_ttl: int = 30,
    ) -> None:
        self.binding_repo = binding_repo
        self.permission_resolver = permission_resolver
        self.classifier = classifier
        self.suggestion = suggestion
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def load_actor(self, actor_id: str) -> Actor:
        """Build the request's Actor: active roles and elevation, computed once."""
        roles = await self.binding_repo.get_active_roles(actor_id)
        return Actor(
            id=actor_id,
            roles=tuple(roles),
            is_elevated=self.classifier.any_elevated(roles),
        )

    async def get_effective_permissions(self, actor: Actor) -> set[str]:
        """Return the actor's permission keys. Uses cache if available."""
        use_cache = self.cache is not None and self.cache.is_available()
        if use_cache:
            cached = await self.cache.get(_cache_key(actor.id))
            if cached is not None:
                return set(cached)

        permissions = await self.permission_resolver.resolve_roles(actor.roles)
        if use_cache:
            await self.cache.set(
                _cache_key(actor.id), sorted(permissions), ttl=self.cache_ttl
            )
        return permissions

    async def get_grouped_permissions(self, actor: Actor) -> dict[str, list[str]]:
        return group_by_module(await self.get_effective_permissions(actor))

    async def authorize(
        self, actor: Actor, required: PermissionKey | str
    ) -> AccessDecision:
        """Allow, or Deny with the actions the actor does hold in the key's module."""
        key = _coerce_key(required)
        if actor.is_elevated:
            return AccessDecision.allow(elevated=True)
        permissions = await self.get_effective_permissions(actor)
        if key.key in permissions:
            return AccessDecision.allow()
        return AccessDecision.deny(self._denial(actor, key, permissions))

    async def require_permission(self, actor: Actor, required: PermissionKey | str) -> None:
        """Raise CapabilityDeniedException if the actor lacks the permission."""
        decision = await self.authorize(actor, required)
        decision.raise_if_denied()

    async def authorize_any(
        self, actor: Actor, required: Sequence[PermissionKey | str]
    ) -> AccessDecision:
        """Allow if the actor holds at least one of the keys."""
        keys = _coerce_keys(required)
        if actor.is_elevated:
            return AccessDecision.allow(elevated=True)
        permissions = await self.get_effective_permissions(actor)
        if any(k.key in permissions for k in keys):
            return AccessDecision.allow()
        return AccessDecision.deny(self._denial(actor, keys[0], permissions))

    async def authorize_all(
        self, actor: Actor, required: Sequence[PermissionKey | str]
    ) -> AccessDecision:
        """Allow only if the actor holds every key; the first missing key is reported."""
        keys = _coerce_keys(required)
        if actor.is_elevated:
            return AccessDecision.allow(elevated=True)
        permissions = await self.get_effective_permissions(actor)
        for k in keys:
            if k.key not in permissions:
                return AccessDecision.deny(self._denial(actor, k, permissions))
        return AccessDecision.allow()

    async def authorize_module(self, actor: Actor, module: str) -> AccessDecision:
        """Allow if elevated or holding any permission in module."""
        try:
            validate_module_name(module)
        except ValueError as e:
            raise ValidationException(str(e), field="module") from e
        if actor.is_elevated:
            return AccessDecision.allow(elevated=True)
        grouped = await self.get_grouped_permissions(actor)
        if grouped.get(module):
            return AccessDecision.allow()
        return AccessDecision.deny(
            DenialReason.module_access(module, actor.role_name, self.suggestion)
        )

    async def has_module_access(self, actor: Actor, module: str) -> bool:
        return (await self.authorize_module(actor, module)).allowed

    async def invalidate_actor_cache(self, actor_id: str) -> None:
        """Invalidate cached permissions for one actor."""
        if self.cache and self.cache.is_available():
            await self.cache.delete(_cache_key(actor_id))

    async def invalidate_all(self) -> None:
        """Invalidate every cached permission set (grant or role changes)."""
        if self.cache and self.cache.is_available():
            await self.cache.delete_pattern(f"{_CACHE_PREFIX}:*")

    def _denial(
        self, actor: Actor, key: PermissionKey, permissions: Iterable[str]
    ) -> DenialReason:
        available = group_by_module(permissions).get(key.module, [])
        return DenialReason.capability(
            required_permission=key.key,
            user_role=actor.role_name,
            available_actions=available,
            suggestion=self.suggestion,
        )


def _coerce_key(value: PermissionKey | str) -> PermissionKey:
    try:
        return PermissionKey.coerce(value)
    except ValueError as e:
        raise ValidationException(str(e), field="permission") from e


def _coerce_keys(values: Sequence[PermissionKey | str]) -> list[PermissionKey]:
    if not values:
        raise ValidationException("At least one permission key is required", field="permissions")
    return [_coerce_key(v) for v in values]


def _cache_key(actor_id: str) -> str:
    return f"{_CACHE_PREFIX}:{actor_id}"
