"""Permissions API: catalog entries and the explicit capability check."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from entitlements.api.v1.dependencies import (
    get_authorization_service,
    get_catalog_query_service,
    get_catalog_service,
    get_current_actor,
    require_permission,
)
from entitlements.application.dtos.actor import Actor
from entitlements.application.services import AuthorizationService, CatalogService
from entitlements.core.limiter import limit_checks, limit_writes
from entitlements.schemas.common import DENIAL_RESPONSES
from entitlements.schemas.permission import (
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionCreateRequest,
    PermissionResponse,
)

router = APIRouter(responses=DENIAL_RESPONSES)


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    _: Annotated[Actor, Depends(require_permission("permissions", "read"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_query_service)],
    module_id: str | None = None,
    include_inactive: bool = False,
):
    permissions = await catalog.list_permissions(
        module_id, include_inactive=include_inactive
    )
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post("/check", response_model=PermissionCheckResponse)
@limit_checks
async def check_permission(
    request: Request,
    body: PermissionCheckRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Check the caller's capability without raising; 200 with allowed=false on deny."""
    if body.mode == "any":
        decision = await auth_svc.authorize_any(actor, body.permissions)
    else:
        decision = await auth_svc.authorize_all(actor, body.permissions)
    reason = decision.reason.to_exception().to_dict() if decision.reason else None
    return PermissionCheckResponse(
        allowed=decision.allowed, elevated=decision.elevated, reason=reason
    )


@router.post("", response_model=PermissionResponse, status_code=201)
@limit_writes
async def create_permission(
    request: Request,
    body: PermissionCreateRequest,
    _: Annotated[Actor, Depends(require_permission("permissions", "create"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Create '<module>_<action>' in an existing, active module."""
    created = await catalog.create_permission(
        body.module_id,
        body.action,
        display_name=body.display_name,
        description=body.description,
    )
    return PermissionResponse.model_validate(created)


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: str,
    _: Annotated[Actor, Depends(require_permission("permissions", "read"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_query_service)],
):
    return PermissionResponse.model_validate(await catalog.get_permission(permission_id))


@router.delete("/{permission_id}", status_code=204)
@limit_writes
async def delete_permission(
    request: Request,
    permission_id: str,
    _: Annotated[Actor, Depends(require_permission("permissions", "delete"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Delete permission; every grant referencing it is removed with it."""
    await catalog.delete_permission(permission_id)
