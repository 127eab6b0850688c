"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, OwnedMixin, and the combined
CatalogModel used by module, permission, and role tables.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, validates
from sqlalchemy.sql import func

from entitlements.domain.exceptions import ValidationException
from entitlements.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class OwnedMixin:
    """Mixin for business rows filtered by ownership.

    owner_id is set at creation to the creating actor (see
    OwnershipFilter.assign_owner). Once the row is persisted the owner is
    fixed: assigning a different value raises ValidationException.
    """

    @declared_attr
    def owner_id(cls) -> Mapped[str]:
        return mapped_column(String, nullable=False, index=True)

    @validates("owner_id")
    def _validate_owner_id(self, key: str, value: str) -> str:
        if not sa_inspect(self).has_identity:
            return value
        current = self.__dict__.get(key)
        if value != current:
            raise ValidationException(
                "owner_id is set at creation and cannot be changed", field=key
            )
        return value


class CatalogModel(CuidMixin, TimestampMixin):
    """Combined mixin: CUID + created_at/updated_at. Common for catalog tables."""

    __abstract__ = True
