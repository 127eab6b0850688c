"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories, the decision point
and the administration services. Routes depend only on these, never on
infrastructure directly.
"""

from entitlements.api.v1.dependencies.auth import get_current_actor_id
from entitlements.api.v1.dependencies.db import (
    get_binding_repo,
    get_binding_repo_for_write,
    get_grant_repo,
    get_grant_repo_for_write,
    get_module_repo,
    get_module_repo_for_write,
    get_permission_repo,
    get_permission_repo_for_write,
    get_role_repo,
    get_role_repo_for_write,
)
from entitlements.api.v1.dependencies.rbac import (
    get_authorization_service,
    get_binding_query_service,
    get_binding_service,
    get_catalog_query_service,
    get_catalog_service,
    get_current_actor,
    get_elevation_classifier,
    get_ownership_filter,
    get_permission_resolver,
    get_role_query_service,
    get_role_service,
    require_all_permissions,
    require_any_permission,
    require_module_access,
    require_ownership,
    require_permission,
)

__all__ = [
    "get_authorization_service",
    "get_binding_repo",
    "get_binding_query_service",
    "get_binding_repo_for_write",
    "get_binding_service",
    "get_catalog_query_service",
    "get_catalog_service",
    "get_current_actor",
    "get_current_actor_id",
    "get_elevation_classifier",
    "get_grant_repo",
    "get_grant_repo_for_write",
    "get_module_repo",
    "get_module_repo_for_write",
    "get_ownership_filter",
    "get_permission_repo",
    "get_permission_repo_for_write",
    "get_permission_resolver",
    "get_role_query_service",
    "get_role_repo",
    "get_role_repo_for_write",
    "get_role_service",
    "require_all_permissions",
    "require_any_permission",
    "require_module_access",
    "require_ownership",
    "require_permission",
]
