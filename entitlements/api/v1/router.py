"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from entitlements.api.v1.dependencies.
"""

from fastapi import APIRouter

from entitlements.api.v1.endpoints import actors, health, modules, permissions, roles

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(modules.router, prefix="/modules", tags=["modules"])
api_router.include_router(
    permissions.router, prefix="/permissions", tags=["permissions"]
)
api_router.include_router(actors.router, prefix="/actors", tags=["actors"])
