"""Pydantic request/response schemas for the API."""

from entitlements.schemas.actor import (
    BindingCreateRequest,
    BindingResponse,
    EffectivePermissionsResponse,
)
from entitlements.schemas.common import ErrorResponse
from entitlements.schemas.health import HealthResponse
from entitlements.schemas.module import (
    ModuleCreateRequest,
    ModuleResponse,
    ModuleUpdate,
)
from entitlements.schemas.permission import (
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionCreateRequest,
    PermissionResponse,
)
from entitlements.schemas.role import (
    RoleCreateRequest,
    RolePermissionsReplaceRequest,
    RolePermissionsResponse,
    RoleResponse,
    RoleUpdate,
)

__all__ = [
    "BindingCreateRequest",
    "BindingResponse",
    "EffectivePermissionsResponse",
    "ErrorResponse",
    "HealthResponse",
    "ModuleCreateRequest",
    "ModuleResponse",
    "ModuleUpdate",
    "PermissionCheckRequest",
    "PermissionCheckResponse",
    "PermissionCreateRequest",
    "PermissionResponse",
    "RoleCreateRequest",
    "RolePermissionsReplaceRequest",
    "RolePermissionsResponse",
    "RoleResponse",
    "RoleUpdate",
]
