"""Decision point, ownership filter, and administration service dependencies (composition root)."""

from __future__ import annotations

from functools import partial
from typing import Annotated, Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.application.dtos.actor import Actor
from entitlements.application.services import (
    AuthorizationService,
    BindingService,
    CatalogService,
    ElevationClassifier,
    OwnershipFilter,
    PermissionResolver,
    RoleService,
)
from entitlements.core.config import get_settings
from entitlements.domain.enums import Action
from entitlements.domain.exceptions import ResourceNotFoundException
from entitlements.domain.value_objects import PermissionKey, validate_module_name
from entitlements.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
    on_commit,
)
from entitlements.infrastructure.persistence.repositories import (
    BindingRepository,
    GrantRepository,
    ModuleRepository,
    PermissionRepository,
    RoleRepository,
)

from . import db as db_deps
from .auth import get_current_actor_id


def get_elevation_classifier() -> ElevationClassifier:
    """Elevation classifier configured from settings."""
    settings = get_settings()
    return ElevationClassifier(
        threshold=settings.elevation_threshold,
        elevated_role_names=settings.elevated_role_names,
    )


def get_ownership_filter() -> OwnershipFilter:
    """Ownership filter for business modules that store an owner attribute."""
    return OwnershipFilter(owner_attribute=get_settings().owner_attribute)


async def get_permission_resolver(
    binding_repo: Annotated[BindingRepository, Depends(db_deps.get_binding_repo)],
    grant_repo: Annotated[GrantRepository, Depends(db_deps.get_grant_repo)],
) -> PermissionResolver:
    return PermissionResolver(binding_repo=binding_repo, grant_repo=grant_repo)


async def get_authorization_service(
    request: Request,
    binding_repo: Annotated[BindingRepository, Depends(db_deps.get_binding_repo)],
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    classifier: Annotated[ElevationClassifier, Depends(get_elevation_classifier)],
) -> AuthorizationService:
    """Build AuthorizationService with resolver and optional cache.

    Cache is set in app lifespan (app.state.cache) when the permission cache
    is enabled; otherwise cache is None and every check hits the DB.
    """
    settings = get_settings()
    return AuthorizationService(
        binding_repo=binding_repo,
        permission_resolver=resolver,
        classifier=classifier,
        suggestion=settings.access_denied_suggestion,
        cache=getattr(request.app.state, "cache", None),
        cache_ttl=settings.cache_ttl_permissions,
    )


async def get_current_actor(
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> Actor:
    """Authenticated actor with roles and elevation, loaded once per request."""
    return await auth_svc.load_actor(actor_id)


def require_permission(module: str, action: Action | str):
    """Dependency factory: require JWT auth and that the actor holds '<module>_<action>'.

    The key is validated when the route is declared, so a typo fails at import.
    """
    required = PermissionKey(module=module, action=action)

    async def _require(
        actor: Annotated[Actor, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> Actor:
        await auth_svc.require_permission(actor, required)
        return actor

    return _require


def _declared_keys(keys: tuple[PermissionKey | str, ...]) -> list[PermissionKey]:
    if not keys:
        raise ValueError("At least one permission key is required")
    return [PermissionKey.coerce(k) for k in keys]


def require_any_permission(*keys: PermissionKey | str):
    """Dependency factory: allow if the actor holds at least one of keys.

    A denial reports the first key.
    """
    required = _declared_keys(keys)

    async def _require(
        actor: Annotated[Actor, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> Actor:
        (await auth_svc.authorize_any(actor, required)).raise_if_denied()
        return actor

    return _require


def require_all_permissions(*keys: PermissionKey | str):
    """Dependency factory: allow only if the actor holds every key.

    A denial reports the first missing key.
    """
    required = _declared_keys(keys)

    async def _require(
        actor: Annotated[Actor, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> Actor:
        (await auth_svc.authorize_all(actor, required)).raise_if_denied()
        return actor

    return _require


def require_module_access(module: str):
    """Dependency factory: allow if the actor holds any permission in module."""
    validate_module_name(module)

    async def _require(
        actor: Annotated[Actor, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> Actor:
        (await auth_svc.authorize_module(actor, module)).raise_if_denied()
        return actor

    return _require


def require_ownership(
    model: type[Any],
    id_param: str = "id",
    *,
    resource_type: str | None = None,
    for_write: bool = False,
):
    """Dependency factory: load a row by path parameter and require that the actor owns it.

    Responds 404 when no row has that id and 403 OWNERSHIP_DENIED when a
    non-elevated actor is not the owner. Returns the row; with for_write it
    is loaded on the request's transactional session so the route can change
    or delete it in the same transaction.
    """
    label = resource_type or model.__tablename__
    session_dependency = get_db_transactional if for_write else get_db

    async def _require(
        request: Request,
        actor: Annotated[Actor, Depends(get_current_actor)],
        ownership: Annotated[OwnershipFilter, Depends(get_ownership_filter)],
        db: AsyncSession = Depends(session_dependency),
    ) -> Any:
        row_id = request.path_params[id_param]
        row = await db.get(model, row_id)
        if row is None:
            raise ResourceNotFoundException(label, row_id)
        ownership.assert_ownership(actor, row, label)
        return row

    return _require


def get_role_service(
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo_for_write)],
    permission_repo: Annotated[
        PermissionRepository, Depends(db_deps.get_permission_repo_for_write)
    ],
    grant_repo: Annotated[GrantRepository, Depends(db_deps.get_grant_repo_for_write)],
    binding_repo: Annotated[
        BindingRepository, Depends(db_deps.get_binding_repo_for_write)
    ],
    classifier: Annotated[ElevationClassifier, Depends(get_elevation_classifier)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    session: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleService:
    """Role service for role CRUD and grant replacement (composition root).

    Cache invalidation runs after the request transaction commits.
    """
    return RoleService(
        role_repo=role_repo,
        permission_repo=permission_repo,
        grant_repo=grant_repo,
        binding_repo=binding_repo,
        classifier=classifier,
        authorization=auth_svc,
        after_commit=partial(on_commit, session),
    )


def get_role_query_service(
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo)],
    permission_repo: Annotated[PermissionRepository, Depends(db_deps.get_permission_repo)],
    grant_repo: Annotated[GrantRepository, Depends(db_deps.get_grant_repo)],
    binding_repo: Annotated[BindingRepository, Depends(db_deps.get_binding_repo)],
    classifier: Annotated[ElevationClassifier, Depends(get_elevation_classifier)],
) -> RoleService:
    """Role service on the read session (list/get only)."""
    return RoleService(
        role_repo=role_repo,
        permission_repo=permission_repo,
        grant_repo=grant_repo,
        binding_repo=binding_repo,
        classifier=classifier,
    )


def get_catalog_service(
    module_repo: Annotated[ModuleRepository, Depends(db_deps.get_module_repo_for_write)],
    permission_repo: Annotated[
        PermissionRepository, Depends(db_deps.get_permission_repo_for_write)
    ],
    grant_repo: Annotated[GrantRepository, Depends(db_deps.get_grant_repo_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    session: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> CatalogService:
    """Catalog service for module/permission administration (composition root)."""
    return CatalogService(
        module_repo=module_repo,
        permission_repo=permission_repo,
        grant_repo=grant_repo,
        authorization=auth_svc,
        after_commit=partial(on_commit, session),
    )


def get_catalog_query_service(
    module_repo: Annotated[ModuleRepository, Depends(db_deps.get_module_repo)],
    permission_repo: Annotated[PermissionRepository, Depends(db_deps.get_permission_repo)],
    grant_repo: Annotated[GrantRepository, Depends(db_deps.get_grant_repo)],
) -> CatalogService:
    """Catalog service on the read session (list/get only)."""
    return CatalogService(
        module_repo=module_repo,
        permission_repo=permission_repo,
        grant_repo=grant_repo,
    )


def get_binding_service(
    binding_repo: Annotated[
        BindingRepository, Depends(db_deps.get_binding_repo_for_write)
    ],
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    session: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> BindingService:
    """Binding service for bind/unbind (composition root)."""
    return BindingService(
        binding_repo=binding_repo,
        role_repo=role_repo,
        authorization=auth_svc,
        after_commit=partial(on_commit, session),
    )


def get_binding_query_service(
    binding_repo: Annotated[BindingRepository, Depends(db_deps.get_binding_repo)],
    role_repo: Annotated[RoleRepository, Depends(db_deps.get_role_repo)],
) -> BindingService:
    """Binding service on the read session (listing only)."""
    return BindingService(binding_repo=binding_repo, role_repo=role_repo)
