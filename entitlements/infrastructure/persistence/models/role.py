"""Role ORM model. Named, leveled bundle of grants."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from entitlements.domain.enums import RoleTier
from entitlements.infrastructure.persistence.database import Base
from entitlements.infrastructure.persistence.models.mixins import CatalogModel


class Role(CatalogModel, Base):
    """Role. Table: role. Unique name.

    tier is fixed at creation; elevation is derived from tier and level at
    read time and never stored as its own flag.
    """

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    tier: Mapped[str] = mapped_column(
        String(16), nullable=False, default=RoleTier.STANDARD.value
    )
    is_system_role: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
