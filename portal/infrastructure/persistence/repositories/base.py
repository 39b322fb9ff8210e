"""Base repository: shared ORM helpers behind DTO-returning repositories."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """ORM-level get/add/update/delete for one model.

    Subclasses expose interface methods that return application DTOs and
    map rows with a module-level ``_<model>_to_result`` function.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_model(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _add(self, obj: ModelType) -> ModelType:
        """Persist a new record; server defaults are loaded back."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _update_fields(
        self, entity_id: str, values: dict[str, Any]
    ) -> ModelType | None:
        """Set attributes on a loaded record and flush; None if it does not exist."""
        obj = await self._get_model(entity_id)
        if obj is None:
            return None
        for key, value in values.items():
            setattr(obj, key, value)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
