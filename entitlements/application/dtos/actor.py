"""Actor: the authenticated caller as seen by both authorization gates."""

from dataclasses import dataclass

from entitlements.application.dtos.role import RoleResult

NO_ROLE_NAME = "none"


@dataclass(frozen=True)
class Actor:
    """Authenticated actor with its active roles and derived elevation.

    Built once per request by AuthorizationService.load_actor; is_elevated is
    computed from the roles at that moment and is shared by the capability
    gate and the ownership filter.
    """

    id: str
    roles: tuple[RoleResult, ...] = ()
    is_elevated: bool = False

    @property
    def primary_role(self) -> RoleResult | None:
        """Highest-level active role (ties broken by name), or None."""
        if not self.roles:
            return None
        return max(self.roles, key=lambda r: (r.level, r.name))

    @property
    def role_name(self) -> str:
        role = self.primary_role
        return role.name if role else NO_ROLE_NAME
