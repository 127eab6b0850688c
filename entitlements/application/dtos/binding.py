"""DTOs for actor-role binding use cases."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BindingResult:
    """Actor-role binding read-model (active or historical).

    role_id is None once the role has been deleted; role_name still names it.
    """

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
