"""Actors API: effective permissions and role bindings."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Request

from entitlements.api.v1.dependencies import (
    get_authorization_service,
    get_binding_query_service,
    get_binding_service,
    get_current_actor,
    require_permission,
)
from entitlements.application.dtos.actor import Actor
from entitlements.application.services import (
    AuthorizationService,
    BindingService,
    group_by_module,
)
from entitlements.core.limiter import limit_writes
from entitlements.schemas.actor import (
    BindingCreateRequest,
    BindingResponse,
    EffectivePermissionsResponse,
)
from entitlements.schemas.common import DENIAL_RESPONSES

router = APIRouter(responses=DENIAL_RESPONSES)


async def _effective_permissions(
    actor: Actor, auth_svc: AuthorizationService, grouped: bool
) -> EffectivePermissionsResponse:
    permissions = sorted(await auth_svc.get_effective_permissions(actor))
    return EffectivePermissionsResponse(
        actor_id=actor.id,
        role=actor.role_name,
        is_elevated=actor.is_elevated,
        permissions=permissions,
        modules=group_by_module(permissions) if grouped else None,
    )


@router.get("/me/permissions", response_model=EffectivePermissionsResponse)
async def get_my_permissions(
    actor: Annotated[Actor, Depends(get_current_actor)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    grouped: bool = False,
):
    """Effective permissions of the caller."""
    return await _effective_permissions(actor, auth_svc, grouped)


@router.get("/{actor_id}/permissions", response_model=EffectivePermissionsResponse)
async def get_actor_permissions(
    actor_id: str,
    _: Annotated[Actor, Depends(require_permission("permissions", "read"))],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    grouped: bool = False,
):
    """Resolver output for any actor; an actor with no bindings resolves to []."""
    target = await auth_svc.load_actor(actor_id)
    return await _effective_permissions(target, auth_svc, grouped)


@router.get("/{actor_id}/roles", response_model=list[BindingResponse])
async def list_actor_roles(
    actor_id: str,
    _: Annotated[Actor, Depends(require_permission("roles", "read"))],
    binding_service: Annotated[BindingService, Depends(get_binding_query_service)],
    include_inactive: bool = False,
):
    bindings = await binding_service.list_bindings(
        actor_id, include_inactive=include_inactive
    )
    return [BindingResponse.model_validate(b) for b in bindings]


@router.post(
    "/{actor_id}/roles/{role_id}", response_model=BindingResponse, status_code=201
)
@limit_writes
async def bind_role(
    request: Request,
    actor_id: str,
    role_id: str,
    current: Annotated[Actor, Depends(require_permission("roles", "update"))],
    binding_service: Annotated[BindingService, Depends(get_binding_service)],
    body: Annotated[BindingCreateRequest | None, Body()] = None,
):
    """Bind role to actor; a previously unbound binding is reactivated."""
    binding = await binding_service.bind(
        actor_id,
        role_id,
        bound_by=current.id,
        expires_at=body.expires_at if body else None,
    )
    return BindingResponse.model_validate(binding)


@router.delete("/{actor_id}/roles/{role_id}", response_model=BindingResponse)
@limit_writes
async def unbind_role(
    request: Request,
    actor_id: str,
    role_id: str,
    current: Annotated[Actor, Depends(require_permission("roles", "update"))],
    binding_service: Annotated[BindingService, Depends(get_binding_service)],
):
    """Deactivate the binding (kept for history)."""
    binding = await binding_service.unbind(actor_id, role_id, unbound_by=current.id)
    return BindingResponse.model_validate(binding)
