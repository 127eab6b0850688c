"""Repository dependencies (composition root).

Read repositories use get_db; write repositories share the request's single
get_db_transactional session so multi-step administration operations commit
or roll back together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
)
from entitlements.infrastructure.persistence.repositories import (
    BindingRepository,
    GrantRepository,
    ModuleRepository,
    PermissionRepository,
    RoleRepository,
)


async def get_binding_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BindingRepository:
    """Binding repository for read operations (active roles, listing)."""
    return BindingRepository(db)


async def get_binding_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> BindingRepository:
    return BindingRepository(db)


async def get_grant_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GrantRepository:
    """Grant repository for read operations (resolver, role permissions)."""
    return GrantRepository(db)


async def get_grant_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> GrantRepository:
    return GrantRepository(db)


async def get_role_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleRepository:
    """Role repository for read operations (list, get by id)."""
    return RoleRepository(db)


async def get_role_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleRepository:
    return RoleRepository(db)


async def get_module_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ModuleRepository:
    return ModuleRepository(db)


async def get_module_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ModuleRepository:
    return ModuleRepository(db)


async def get_permission_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionRepository:
    return PermissionRepository(db)


async def get_permission_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PermissionRepository:
    return PermissionRepository(db)
