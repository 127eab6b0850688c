"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from entitlements.domain.enums import RoleTier
from entitlements.domain.value_objects import MAX_ROLE_LEVEL, MIN_ROLE_LEVEL


class RoleCreateRequest(BaseModel):
    """Request body for creating a role, optionally with its initial grant set."""

    name: str = Field(..., min_length=1, max_length=64)
    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    level: int = Field(default=1, ge=MIN_ROLE_LEVEL, le=MAX_ROLE_LEVEL)
    tier: RoleTier | None = Field(
        default=None,
        description="Omit to derive from the configured elevated role names",
    )
    is_system_role: bool = False
    permissions: list[str] = Field(default_factory=list, max_length=500)


class RoleUpdate(BaseModel):
    """Request body for updating a role (partial). tier cannot be changed."""

    name: str | None = Field(default=None, min_length=1, max_length=64)
    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    level: int | None = Field(default=None, ge=MIN_ROLE_LEVEL, le=MAX_ROLE_LEVEL)
    is_active: bool | None = None

    @field_validator("name", "level", "is_active")
    @classmethod
    def not_null(cls, v):
        """Omit a field to leave it unchanged; explicit null is rejected."""
        if v is None:
            raise ValueError("must not be null")
        return v


class RoleResponse(BaseModel):
    """Role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str | None
    description: str | None
    level: int
    tier: RoleTier
    is_system_role: bool
    is_active: bool


class RolePermissionsReplaceRequest(BaseModel):
    """Request body for PUT /roles/{id}/permissions: the complete new grant set."""

    permissions: list[str] = Field(default_factory=list, max_length=500)


class RolePermissionsResponse(BaseModel):
    """A role's granted permission keys, flat and grouped by module."""

    role_id: str
    permissions: list[str]
    modules: dict[str, list[str]]
