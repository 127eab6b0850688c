"""Modules API: catalog of functional areas, optionally expanded with permissions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from entitlements.api.v1.dependencies import (
    get_catalog_query_service,
    get_catalog_service,
    require_permission,
)
from entitlements.application.dtos.actor import Actor
from entitlements.application.services import CatalogService
from entitlements.core.limiter import limit_writes
from entitlements.schemas.common import DENIAL_RESPONSES
from entitlements.schemas.module import (
    ModuleCreateRequest,
    ModuleResponse,
    ModuleUpdate,
)

router = APIRouter(responses=DENIAL_RESPONSES)


@router.get("", response_model=list[ModuleResponse])
async def list_modules(
    _: Annotated[Actor, Depends(require_permission("modules", "read"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_query_service)],
    expand: Annotated[str | None, Query(pattern="^permissions$")] = None,
    include_inactive: bool = False,
):
    """List modules by display order; ?expand=permissions embeds each module's permissions."""
    modules = await catalog.list_modules(
        expand_permissions=expand == "permissions",
        include_inactive=include_inactive,
    )
    return [ModuleResponse.model_validate(m) for m in modules]


@router.get("/{module_id}", response_model=ModuleResponse)
async def get_module(
    module_id: str,
    _: Annotated[Actor, Depends(require_permission("modules", "read"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_query_service)],
):
    return ModuleResponse.model_validate(await catalog.get_module(module_id))


@router.post("", response_model=ModuleResponse, status_code=201)
@limit_writes
async def create_module(
    request: Request,
    body: ModuleCreateRequest,
    _: Annotated[Actor, Depends(require_permission("modules", "create"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    created = await catalog.create_module(
        body.name,
        body.display_name,
        body.route,
        body.order,
        is_active=body.is_active,
    )
    return ModuleResponse.model_validate(created)


@router.put("/{module_id}", response_model=ModuleResponse)
@limit_writes
async def update_module(
    request: Request,
    module_id: str,
    body: ModuleUpdate,
    _: Annotated[Actor, Depends(require_permission("modules", "update"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Update module; renaming or deactivating a referenced module is rejected (409)."""
    updated = await catalog.update_module(
        module_id, **body.model_dump(exclude_unset=True)
    )
    return ModuleResponse.model_validate(updated)


@router.delete("/{module_id}", status_code=204)
@limit_writes
async def delete_module(
    request: Request,
    module_id: str,
    _: Annotated[Actor, Depends(require_permission("modules", "delete"))],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    await catalog.delete_module(module_id)
