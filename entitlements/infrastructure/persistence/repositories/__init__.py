"""SQLAlchemy repositories. Read methods return application DTOs."""

from entitlements.infrastructure.persistence.repositories.base import BaseRepository
from entitlements.infrastructure.persistence.repositories.binding_repo import (
    BindingRepository,
)
from entitlements.infrastructure.persistence.repositories.grant_repo import (
    GrantRepository,
)
from entitlements.infrastructure.persistence.repositories.module_repo import (
    ModuleRepository,
)
from entitlements.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from entitlements.infrastructure.persistence.repositories.role_repo import (
    RoleRepository,
)

__all__ = [
    "BaseRepository",
    "BindingRepository",
    "GrantRepository",
    "ModuleRepository",
    "PermissionRepository",
    "RoleRepository",
]
