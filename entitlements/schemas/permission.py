"""Permission API schemas (catalog entries and capability checks)."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from entitlements.domain.enums import Action


class PermissionCreateRequest(BaseModel):
    """Request body for creating a permission; key is derived as '<module>_<action>'."""

    module_id: str
    action: Action
    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)


class PermissionResponse(BaseModel):
    """Permission list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    key: str
    display_name: str
    description: str | None
    module_id: str
    is_active: bool


class PermissionCheckRequest(BaseModel):
    """Request body for POST /permissions/check.

    With several keys, mode decides whether any one of them or all of them
    must be held.
    """

    permissions: list[str] = Field(..., min_length=1, max_length=50)
    mode: Literal["any", "all"] = "all"


class PermissionCheckResponse(BaseModel):
    """Result of a capability check: allowed, and the denial body when not."""

    allowed: bool
    elevated: bool = False
    reason: dict[str, Any] | None = None
