"""Seed the default entitlement catalog (modules, permissions, roles, grants).

Usage:
    python -m scripts.seed_rbac [superadmin_actor_id]

With an actor id, that actor is also bound to SuperAdmin so there is someone
who can administer the catalog. Safe to re-run: existing rows are kept.
"""

import asyncio
import sys

from entitlements.application.services import (
    BindingService,
    CatalogSeeder,
    CatalogService,
    ElevationClassifier,
    RoleService,
)
from entitlements.core.config import get_settings
from entitlements.domain.exceptions import CatalogConflictException
from entitlements.infrastructure.persistence import database
from entitlements.infrastructure.persistence.repositories import (
    BindingRepository,
    GrantRepository,
    ModuleRepository,
    PermissionRepository,
    RoleRepository,
)
from entitlements.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def main() -> None:
    """Seed the catalog, then optionally bind the given actor to SuperAdmin."""
    superadmin_actor = sys.argv[1] if len(sys.argv) > 1 else None

    settings = get_settings()
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        logger.error("AsyncSessionLocal not configured")
        sys.exit(1)

    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            module_repo = ModuleRepository(session)
            permission_repo = PermissionRepository(session)
            role_repo = RoleRepository(session)
            grant_repo = GrantRepository(session)
            binding_repo = BindingRepository(session)
            classifier = ElevationClassifier(
                settings.elevation_threshold, settings.elevated_role_names
            )
            seeder = CatalogSeeder(
                catalog=CatalogService(module_repo, permission_repo, grant_repo),
                roles=RoleService(
                    role_repo, permission_repo, grant_repo, binding_repo, classifier
                ),
                module_repo=module_repo,
                permission_repo=permission_repo,
                role_repo=role_repo,
            )
            result = await seeder.seed(granted_by="seed_rbac")
            print(
                f"Seeded {len(result.modules)} module(s), "
                f"{len(result.permissions)} permission(s), {len(result.roles)} role(s)"
            )

            if superadmin_actor:
                superadmin = await role_repo.get_by_name("SuperAdmin")
                bindings = BindingService(binding_repo, role_repo)
                try:
                    await bindings.bind(superadmin_actor, superadmin.id, bound_by="seed_rbac")
                    print(f"Bound {superadmin_actor} to SuperAdmin")
                except CatalogConflictException:
                    print(f"{superadmin_actor} is already bound to SuperAdmin")

    await database.engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
