"""Default catalog: modules, CRUD permissions, and the standard roles.

Seeding goes through the administration services so every catalog rule
applies; existing rows are left as they are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TypedDict

from entitlements.application.interfaces.repositories import (
    IModuleRepository,
    IPermissionRepository,
    IRoleRepository,
)
from entitlements.application.services.catalog_service import CatalogService
from entitlements.application.services.role_service import RoleService
from entitlements.domain.enums import Action, RoleTier
from entitlements.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)

_CRUD = (Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE)


class ModuleData(TypedDict):
    """Module configuration for default modules."""

    name: str
    display_name: str
    route: str
    actions: tuple[Action, ...]


class RoleData(TypedDict):
    """Role configuration for default roles. permissions=None grants every seeded key."""

    name: str
    level: int
    tier: RoleTier
    description: str
    permissions: list[str] | None


DEFAULT_MODULES: list[ModuleData] = [
    {"name": "campaigns", "display_name": "Campaigns", "route": "/campaigns", "actions": _CRUD + (Action.EXPORT,)},
    {"name": "campaign_data", "display_name": "Campaign Data", "route": "/campaign-data", "actions": _CRUD + (Action.EXPORT,)},
    {"name": "brands", "display_name": "Brands", "route": "/brands", "actions": _CRUD},
    {"name": "cards", "display_name": "Cards", "route": "/cards", "actions": _CRUD},
    {"name": "reports", "display_name": "Reports", "route": "/reports", "actions": (Action.READ, Action.EXPORT)},
    {"name": "users", "display_name": "Users", "route": "/users", "actions": _CRUD},
    {"name": "roles", "display_name": "Roles", "route": "/roles", "actions": _CRUD},
    {"name": "modules", "display_name": "Modules", "route": "/modules", "actions": _CRUD},
    {"name": "permissions", "display_name": "Permissions", "route": "/permissions", "actions": (Action.READ, Action.CREATE, Action.DELETE)},
]

_BUSINESS_MODULES = ("campaigns", "campaign_data", "brands", "cards")

DEFAULT_ROLES: list[RoleData] = [
    {
        "name": "SuperAdmin",
        "level": 10,
        "tier": RoleTier.ELEVATED,
        "description": "Top-tier operator; bypasses capability and ownership checks",
        "permissions": [],
    },
    {
        "name": "Admin",
        "level": 8,
        "tier": RoleTier.STANDARD,
        "description": "Every seeded capability, subject to ownership filtering",
        "permissions": None,
    },
    {
        "name": "Manager",
        "level": 5,
        "tier": RoleTier.STANDARD,
        "description": "Manage own campaigns, brands and cards; read and export reports",
        "permissions": [
            f"{m}_{a}" for m in _BUSINESS_MODULES for a in ("read", "create", "update")
        ]
        + ["reports_read", "reports_export"],
    },
    {
        "name": "Viewer",
        "level": 1,
        "tier": RoleTier.STANDARD,
        "description": "Read-only access to own business data and reports",
        "permissions": [f"{m}_read" for m in _BUSINESS_MODULES] + ["reports_read"],
    },
]


@dataclass
class SeedResult:
    """What a seeding run created (names/keys); empty lists on a re-run."""

    modules: list[str] = field(default_factory=list)
    permissions: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)


class CatalogSeeder:
    """Idempotent seeding of the default catalog through the administration services."""

    def __init__(
        self,
        catalog: CatalogService,
        roles: RoleService,
        module_repo: IModuleRepository,
        permission_repo: IPermissionRepository,
        role_repo: IRoleRepository,
    ) -> None:
        self._catalog = catalog
        self._roles = roles
        self._module_repo = module_repo
        self._permission_repo = permission_repo
        self._role_repo = role_repo

    async def seed(self, granted_by: str | None = None) -> SeedResult:
        result = SeedResult()
        all_keys: list[str] = []
        for order, data in enumerate(DEFAULT_MODULES):
            module = await self._module_repo.get_by_name(data["name"])
            if module is None:
                module = await self._catalog.create_module(
                    data["name"], data["display_name"], data["route"], order
                )
                result.modules.append(module.name)
            for action in data["actions"]:
                key = PermissionKey(module=module.name, action=action).key
                all_keys.append(key)
                if await self._permission_repo.get_by_key(key) is None:
                    await self._catalog.create_permission(module.id, action)
                    result.permissions.append(key)

        for role_data in DEFAULT_ROLES:
            if await self._role_repo.get_by_name(role_data["name"]):
                continue
            role = await self._roles.create_role(
                name=role_data["name"],
                level=role_data["level"],
                description=role_data["description"],
                tier=role_data["tier"],
                is_system_role=True,
            )
            keys = role_data["permissions"]
            await self._roles.replace_role_permissions(
                role.id, all_keys if keys is None else keys, granted_by=granted_by
            )
            result.roles.append(role.name)

        logger.info(
            "Catalog seeded: %s module(s), %s permission(s), %s role(s) created",
            len(result.modules),
            len(result.permissions),
            len(result.roles),
        )
        return result
