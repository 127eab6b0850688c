"""Module ORM model: a functional area that owns a set of permissions."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from entitlements.infrastructure.persistence.database import Base
from entitlements.infrastructure.persistence.models.mixins import CatalogModel


class Module(CatalogModel, Base):
    """Module. Table: module. Unique name; name frozen once permissions reference it."""

    __tablename__ = "module"

    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    route: Mapped[str | None] = mapped_column(String(255), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
