"""Actor API schemas: effective permissions and role bindings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EffectivePermissionsResponse(BaseModel):
    """Resolver output for one actor."""

    actor_id: str
    role: str = Field(..., description="Name of the actor's highest-level active role")
    is_elevated: bool
    permissions: list[str]
    modules: dict[str, list[str]] | None = Field(
        default=None, description="Present when grouped=true"
    )


class BindingCreateRequest(BaseModel):
    """Optional body for binding a role to an actor."""

    expires_at: datetime | None = None


class BindingResponse(BaseModel):
    """Actor-role binding (active or historical)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    actor_id: str
    role_id: str | None
    role_name: str
    is_active: bool
    bound_by: str | None
    bound_at: datetime
    expires_at: datetime | None
    unbound_by: str | None
    unbound_at: datetime | None
