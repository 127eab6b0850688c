"""Domain enumerations for the entitlement catalog.

Enums represent fixed sets of domain values (role tier, permission action).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RoleTier(_ValuesMixin, str, Enum):
    """Role tier, fixed when the role is created.

    ELEVATED roles bypass capability checks and ownership filtering.
    """

    ELEVATED = "elevated"
    STANDARD = "standard"


class Action(_ValuesMixin, str, Enum):
    """Closed set of actions a permission can grant within a module.

    Declaration order is the order actions are reported back to callers.
    """

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"
    MANAGE = "manage"
