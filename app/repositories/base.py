"""
Base repository class with common CRUD operations using async SQLAlchemy.
Provides generic database operations that can be extended by specific repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common CRUD operations.
    Every write commits; a failed write rolls the session back and re-raises.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_in)
        return await self.save(db_obj)

    async def save(self, db_obj: ModelType) -> ModelType:
        """
        Persist a new or modified instance.

        Args:
            db_obj: Model instance to add and commit

        Returns:
            The refreshed instance
        """
        try:
            self.db.add(db_obj)
            await self.db.commit()
            await self.db.refresh(db_obj)
            logger.debug(f"Saved {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save {self.model.__name__}: {e}")
            raise

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Args:
            id: UUID of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        obj = await self.db.get(self.model, id)
        if obj is None:
            logger.debug(f"{self.model.__name__} with id {id} not found")
        return obj

    async def get_multi(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[ModelType]:
        """
        Get multiple records, newest first.

        Args:
            skip: Number of records to skip (for pagination)
            limit: Maximum number of records to return
            filters: Dictionary of field equality filters

        Returns:
            List of model instances
        """
        query = self._apply_filters(select(self.model), filters)
        query = query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)

        result = await self.db.execute(query)
        objects = list(result.scalars().all())
        logger.debug(f"Retrieved {len(objects)} {self.model.__name__} records")
        return objects

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Apply field values to an instance and commit.

        Args:
            db_obj: Instance to modify
            obj_in: Dictionary of field values to set

        Returns:
            Updated model instance
        """
        for field, value in obj_in.items():
            if not hasattr(db_obj, field):
                raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")
            setattr(db_obj, field, value)
        return await self.save(db_obj)

    async def delete(self, db_obj: ModelType) -> None:
        """
        Delete an instance, letting ORM cascades remove dependent rows.

        Args:
            db_obj: Instance to delete
        """
        try:
            await self.db.delete(db_obj)
            await self.db.commit()
            logger.debug(f"Deleted {self.model.__name__} with id: {db_obj.id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete {self.model.__name__} {db_obj.id}: {e}")
            raise

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """
        Count records with optional filtering.

        Args:
            filters: Dictionary of field equality filters

        Returns:
            Number of matching records
        """
        query = self._apply_filters(select(func.count(self.model.id)), filters)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def exists(self, id: uuid.UUID) -> bool:
        """
        Check if a record exists by its ID.

        Args:
            id: UUID of the record to check

        Returns:
            True if record exists, False otherwise
        """
        return await self.count({"id": id}) > 0

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Get a record by a specific field value.

        Args:
            field: Field name to search by
            value: Value to search for

        Returns:
            Model instance if found, None otherwise
        """
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")

        query = select(self.model).where(getattr(self.model, field) == value)
        result = await self.db.execute(query)
        return result.scalars().first()

    def _apply_filters(self, query, filters: Optional[Dict[str, Any]]):
        """Add equality (or IN for lists) conditions for known columns."""
        if not filters:
            return query
        for field, value in filters.items():
            if not hasattr(self.model, field):
                raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")
            column = getattr(self.model, field)
            if isinstance(value, (list, tuple, set)):
                query = query.where(column.in_(list(value)))
            else:
                query = query.where(column == value)
        return query
