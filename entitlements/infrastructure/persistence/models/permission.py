"""Permission, RolePermission (grant), and ActorRoleBinding ORM models."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from entitlements.infrastructure.persistence.database import Base
from entitlements.infrastructure.persistence.models.mixins import (
    CatalogModel,
    CuidMixin,
)
from entitlements.shared.utils.datetime import utc_now


class Permission(CatalogModel, Base):
    """Permission. Table: permission. Unique key '<module>_<action>'."""

    __tablename__ = "permission"

    key: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    module_id: Mapped[str] = mapped_column(
        String, ForeignKey("module.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class RolePermission(CuidMixin, Base):
    """Grant: many-to-many role-permission. Table: role_permission."""

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )
    granted_by: Mapped[str | None] = mapped_column(String, nullable=True)
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        Index("ix_role_permission_permission", "permission_id"),
    )


class ActorRoleBinding(CuidMixin, Base):
    """Actor-role binding. Table: actor_role_binding.

    Unbinding flips is_active to False instead of deleting the row. role_name
    records the role at bind time; deleting the role nulls role_id on the
    remaining (inactive) rows so the history survives.
    """

    __tablename__ = "actor_role_binding"

    actor_id: Mapped[str] = mapped_column(String, nullable=False)
    role_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("role.id", ondelete="SET NULL"), nullable=True
    )
    role_name: Mapped[str] = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    bound_by: Mapped[str | None] = mapped_column(String, nullable=True)
    bound_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    unbound_by: Mapped[str | None] = mapped_column(String, nullable=True)
    unbound_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("actor_id", "role_id", name="uq_actor_role_binding"),
        Index("ix_actor_role_binding_lookup", "actor_id", "is_active"),
        Index("ix_actor_role_binding_role", "role_id", "is_active"),
    )
