"""Persistence models: ORM entities and mixins."""

from entitlements.infrastructure.persistence.models.mixins import (
    CatalogModel,
    CuidMixin,
    OwnedMixin,
    TimestampMixin,
)
from entitlements.infrastructure.persistence.models.module import Module
from entitlements.infrastructure.persistence.models.permission import (
    ActorRoleBinding,
    Permission,
    RolePermission,
)
from entitlements.infrastructure.persistence.models.role import Role

__all__ = [
    "ActorRoleBinding",
    "CatalogModel",
    "CuidMixin",
    "Module",
    "OwnedMixin",
    "Permission",
    "Role",
    "RolePermission",
    "TimestampMixin",
]
