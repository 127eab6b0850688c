"""Application ports: repository and service protocols."""

from entitlements.application.interfaces.repositories import (
    IBindingRepository,
    IGrantRepository,
    IModuleRepository,
    IPermissionRepository,
    IRoleRepository,
)
from entitlements.application.interfaces.services import (
    IAfterCommit,
    ICacheService,
    IPermissionResolver,
)

__all__ = [
    "IAfterCommit",
    "IBindingRepository",
    "ICacheService",
    "IGrantRepository",
    "IModuleRepository",
    "IPermissionRepository",
    "IPermissionResolver",
    "IRoleRepository",
]
