"""Module API schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from entitlements.domain.value_objects import MODULE_NAME_MAX_LENGTH
from entitlements.schemas.permission import PermissionResponse


class ModuleCreateRequest(BaseModel):
    """Request body for creating a module."""

    name: str = Field(..., min_length=1, max_length=MODULE_NAME_MAX_LENGTH)
    display_name: str = Field(..., min_length=1, max_length=255)
    route: str | None = Field(default=None, max_length=255)
    order: int = 0
    is_active: bool = True


class ModuleUpdate(BaseModel):
    """Request body for updating a module (partial). name is frozen once referenced."""

    name: str | None = Field(default=None, min_length=1, max_length=MODULE_NAME_MAX_LENGTH)
    display_name: str | None = Field(default=None, min_length=1, max_length=255)
    route: str | None = Field(default=None, max_length=255)
    order: int | None = None
    is_active: bool | None = None

    @field_validator("name", "display_name", "order", "is_active")
    @classmethod
    def not_null(cls, v):
        """Omit a field to leave it unchanged; explicit null is rejected (route may be null)."""
        if v is None:
            raise ValueError("must not be null")
        return v


class ModuleResponse(BaseModel):
    """Module list/detail response; permissions present when expanded."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str
    route: str | None
    order: int
    is_active: bool
    permissions: list[PermissionResponse] = Field(default_factory=list)
