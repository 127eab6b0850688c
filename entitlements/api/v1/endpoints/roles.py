"""Roles API: list, get, create, update, delete, and the role's grant set."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from entitlements.api.v1.dependencies import (
    get_role_query_service,
    get_role_service,
    require_permission,
)
from entitlements.application.dtos.actor import Actor
from entitlements.application.dtos.catalog import PermissionResult
from entitlements.application.services import RoleService, group_by_module
from entitlements.core.limiter import limit_writes
from entitlements.schemas.common import DENIAL_RESPONSES
from entitlements.schemas.role import (
    RoleCreateRequest,
    RolePermissionsReplaceRequest,
    RolePermissionsResponse,
    RoleResponse,
    RoleUpdate,
)

router = APIRouter(responses=DENIAL_RESPONSES)


def _permissions_response(
    role_id: str, permissions: list[PermissionResult]
) -> RolePermissionsResponse:
    keys = [p.key for p in permissions]
    return RolePermissionsResponse(
        role_id=role_id, permissions=keys, modules=group_by_module(keys)
    )


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    actor: Annotated[Actor, Depends(require_permission("roles", "create"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Create a role; optional initial permissions are granted in the same transaction."""
    created = await role_service.create_role(
        name=body.name,
        level=body.level,
        display_name=body.display_name,
        description=body.description,
        tier=body.tier,
        is_system_role=body.is_system_role,
    )
    if body.permissions:
        await role_service.replace_role_permissions(
            created.id, body.permissions, granted_by=actor.id
        )
    return RoleResponse.model_validate(created)


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    _: Annotated[Actor, Depends(require_permission("roles", "read"))],
    role_service: Annotated[RoleService, Depends(get_role_query_service)],
    skip: int = 0,
    limit: int = 100,
    include_inactive: bool = False,
):
    """List roles, highest level first (paginated)."""
    roles = await role_service.list_roles(
        skip, limit, include_inactive=include_inactive
    )
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    _: Annotated[Actor, Depends(require_permission("roles", "read"))],
    role_service: Annotated[RoleService, Depends(get_role_query_service)],
):
    return RoleResponse.model_validate(await role_service.get_role(role_id))


@router.put("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    _: Annotated[Actor, Depends(require_permission("roles", "update"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Update role (name, display_name, description, level, is_active)."""
    changes = body.model_dump(exclude_unset=True)
    updated = await role_service.update_role(role_id, **changes)
    return RoleResponse.model_validate(updated)


@router.delete("/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    _: Annotated[Actor, Depends(require_permission("roles", "delete"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Delete role and its grants; 409 while any active binding references it."""
    await role_service.delete_role(role_id)


@router.get("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def get_role_permissions(
    role_id: str,
    _: Annotated[Actor, Depends(require_permission("roles", "read"))],
    role_service: Annotated[RoleService, Depends(get_role_query_service)],
):
    permissions = await role_service.get_role_permissions(role_id)
    return _permissions_response(role_id, permissions)


@router.put("/{role_id}/permissions", response_model=RolePermissionsResponse)
@limit_writes
async def replace_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsReplaceRequest,
    actor: Annotated[Actor, Depends(require_permission("roles", "update"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Replace the role's grant set atomically (delete all, then insert the new set)."""
    permissions = await role_service.replace_role_permissions(
        role_id, body.permissions, granted_by=actor.id
    )
    return _permissions_response(role_id, permissions)
