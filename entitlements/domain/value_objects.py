"""Domain value objects for the entitlement catalog.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

from entitlements.domain.enums import Action

# Module names: lowercase alphanumeric with optional underscores (e.g. campaign_data).
_MODULE_NAME_RE = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")
MODULE_NAME_MAX_LENGTH = 64

# Inclusive bounds for Role.level.
MIN_ROLE_LEVEL = 0
MAX_ROLE_LEVEL = 10


def validate_module_name(value: str) -> str:
    """Return value if it is a valid module name; raise ValueError otherwise."""
    if not value:
        raise ValueError("Module name must be a non-empty string")
    if len(value) > MODULE_NAME_MAX_LENGTH:
        raise ValueError(
            f"Module name must not exceed {MODULE_NAME_MAX_LENGTH} characters"
        )
    if not _MODULE_NAME_RE.match(value):
        raise ValueError(
            "Module name must be lowercase alphanumeric with optional underscores "
            "(e.g., 'campaigns', 'campaign_data')"
        )
    return value


def validate_role_level(level: int) -> int:
    """Return level if it is within MIN_ROLE_LEVEL..MAX_ROLE_LEVEL; raise ValueError otherwise."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise ValueError("Role level must be an integer")
    if level < MIN_ROLE_LEVEL or level > MAX_ROLE_LEVEL:
        raise ValueError(
            f"Role level must be between {MIN_ROLE_LEVEL} and {MAX_ROLE_LEVEL}"
        )
    return level


@dataclass(frozen=True)
class PermissionKey:
    """A (module, action) pair with its stable storage key ``<module>_<action>``.

    Module names may themselves contain underscores; the action is always the
    last segment and must be a member of Action, so parsing is unambiguous.
    """

    module: str
    action: Action

    def __post_init__(self) -> None:
        validate_module_name(self.module)
        if not isinstance(self.action, Action):
            object.__setattr__(self, "action", _parse_action(self.action))

    @property
    def key(self) -> str:
        return f"{self.module}_{self.action.value}"

    def __str__(self) -> str:
        return self.key

    @classmethod
    def parse(cls, key: str) -> "PermissionKey":
        """Build a PermissionKey from its string form (e.g. 'campaigns_delete')."""
        if not key or "_" not in key:
            raise ValueError(
                f"Permission key must have the form '<module>_<action>', got: {key!r}"
            )
        module, action = key.rsplit("_", 1)
        return cls(module=module, action=_parse_action(action))

    @classmethod
    def coerce(cls, value: "PermissionKey | str") -> "PermissionKey":
        """Return value unchanged if already a PermissionKey, else parse it."""
        if isinstance(value, PermissionKey):
            return value
        return cls.parse(value)


def _parse_action(value: str) -> Action:
    try:
        return Action(value)
    except ValueError:
        raise ValueError(
            f"Unknown action {value!r}; expected one of: {', '.join(Action.values())}"
        ) from None
