"""Base repository for tables holding one row per business."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository for models keyed by an external business id."""

    def __init__(self, model: type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLModel class with a unique ``business_id`` column
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_business_id(self, business_id: str) -> ModelType | None:
        """
        Get the record belonging to a business.

        Args:
            business_id: External business id

        Returns:
            Model instance or None
        """
        result = await self.session.execute(
            select(self.model).where(self.model.business_id == business_id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Insert a new record and load its generated columns."""
        return await self._save(obj)

    async def update(self, obj: ModelType) -> ModelType:
        """Write changes to an existing record."""
        return await self._save(obj)

    async def replace(self, business_id: str, **values: Any) -> ModelType:
        """
        Overwrite the business's row with ``values``, inserting it if absent.

        Columns not named in ``values`` keep their stored value; ``updated_at``
        is refreshed when the model has one.

        Args:
            business_id: External business id
            **values: Column values to store

        Returns:
            Stored model instance
        """
        obj = await self.get_by_business_id(business_id)
        if obj is None:
            return await self.create(self.model(business_id=business_id, **values))

        for name, value in values.items():
            setattr(obj, name, value)
        if hasattr(obj, "updated_at"):
            obj.updated_at = datetime.utcnow()
        return await self.update(obj)

    async def _save(self, obj: ModelType) -> ModelType:
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj
