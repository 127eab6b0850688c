"""Base repository: generic CRUD and lifecycle hooks."""

from typing import Any, Generic, TypeVar

from sqlalchemy import and_, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from entitlements.domain.exceptions import ResourceNotFoundException
from entitlements.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update, delete and hooks.

    Subclasses override _on_after_create and _on_before_delete
    to log catalog mutations or clean up dependent rows.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an existing record.

        Detached instances are merged after an existence check by primary key;
        raises ResourceNotFoundException when no row matches.
        """
        if object_session(obj) is not self.db.sync_session:
            pk_attrs = sa_inspect(self.model).primary_key
            stmt = select(self.model).where(
                and_(
                    *(getattr(self.model, c.key) == getattr(obj, c.key) for c in pk_attrs)
                )
            )
            result = await self.db.execute(stmt)
            if result.scalar_one_or_none() is None:
                pk_str = ",".join(str(getattr(obj, c.key)) for c in pk_attrs)
                raise ResourceNotFoundException(self.model.__name__, pk_str)
            obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Run _on_before_delete hook then delete the record."""
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to log or emit events."""

    async def _on_before_delete(self, obj: ModelType) -> None:
        """Override in subclasses to log or remove dependent rows."""
