"""Application services: decision point, resolver, ownership filter, administration."""

from entitlements.application.services.authorization_service import (
    AuthorizationService,
)
from entitlements.application.services.binding_service import BindingService
from entitlements.application.services.catalog_seeder import CatalogSeeder
from entitlements.application.services.catalog_service import CatalogService
from entitlements.application.services.elevation import ElevationClassifier
from entitlements.application.services.ownership import OwnershipFilter
from entitlements.application.services.permission_resolver import (
    PermissionResolver,
    group_by_module,
)
from entitlements.application.services.role_service import RoleService

__all__ = [
    "AuthorizationService",
    "BindingService",
    "CatalogSeeder",
    "CatalogService",
    "ElevationClassifier",
    "OwnershipFilter",
    "PermissionResolver",
    "RoleService",
    "group_by_module",
]
