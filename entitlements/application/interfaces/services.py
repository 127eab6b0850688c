"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol

from entitlements.application.dtos.role import RoleResult


class IPermissionResolver(Protocol):
    """Protocol for resolving an actor's effective permission set."""

    async def resolve(self, actor_id: str) -> set[str]:
        """Return the union of permission keys across the actor's active bindings."""
        ...

    async def resolve_roles(self, roles: Iterable[RoleResult]) -> set[str]:
        """Return the union of permission keys granted to the given roles."""
        ...


class ICacheService(Protocol):
    """Protocol for the optional short-TTL permission cache."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> Any:
        """Store value with optional TTL in seconds."""
        ...

    async def delete(self, key: str) -> Any:
        """Remove key from cache."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Remove all keys matching a glob pattern; return count removed."""
        ...


class IAfterCommit(Protocol):
    """Defers a coroutine callback until the current unit of work commits."""

    def __call__(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Queue callback; it is dropped if the transaction rolls back."""
        ...
