"""Persistence: async engine, session dependencies, ORM models, and repositories."""

from entitlements.infrastructure.persistence.database import (
    Base,
    get_db,
    get_db_transactional,
)

__all__ = ["Base", "get_db", "get_db_transactional"]
