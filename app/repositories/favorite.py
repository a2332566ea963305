"""
Favorite repository for a user's saved properties.
Adds are single insert-if-absent statements so concurrent saves cannot duplicate a row.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, insert as generic_insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from app.repositories.base import BaseRepository
from app.models.favorite import Favorite
from app.models.property import Property
from app.database import utcnow
from datetime import timedelta
from typing import List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """Repository for saved properties."""

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_property_ids(self, user_id: uuid.UUID) -> List[uuid.UUID]:
        """
        Get the user's saved property IDs in the order they were saved.

        Args:
            user_id: UUID of the user

        Returns:
            List of property IDs
        """
        query = (
            select(Favorite.property_id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at, Favorite.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_properties_page(
        self,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        Get one page of the user's saved properties.

        Returns:
            Tuple of (properties, total saved count)
        """
        total = await self.count({"user_id": user_id})
        query = (
            select(Property)
            .join(Favorite, Favorite.property_id == Property.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at, Favorite.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def add(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Save a property for a user unless it is already saved.

        Args:
            user_id: UUID of the user
            property_id: UUID of the property

        Returns:
            True if a new row was inserted
        """
        now = utcnow()
        values = {
            "id": uuid.uuid4(),
            "user_id": user_id,
            "property_id": property_id,
            "created_at": now,
            "updated_at": now,
        }
        dialect = self.db.get_bind().dialect.name

        try:
            if dialect in ("postgresql", "sqlite"):
                insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
                stmt = insert(Favorite.__table__).values(**values).on_conflict_do_nothing(
                    index_elements=["user_id", "property_id"]
                )
                result = await self.db.execute(stmt)
                inserted = result.rowcount > 0
            else:
                await self.db.execute(generic_insert(Favorite.__table__).values(**values))
                inserted = True
            await self.db.commit()
        except IntegrityError:
            # Another request saved the same pair first
            await self.db.rollback()
            inserted = False
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add favorite {property_id} for user {user_id}: {e}")
            raise

        return inserted

    async def remove(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Remove a saved property.

        Returns:
            True if a row was deleted
        """
        try:
            result = await self.db.execute(
                delete(Favorite).where(Favorite.user_id == user_id, Favorite.property_id == property_id)
            )
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove favorite {property_id} for user {user_id}: {e}")
            raise

    async def replace(self, user_id: uuid.UUID, property_ids: List[uuid.UUID]) -> None:
        """
        Replace the user's saved set in one transaction, keeping the given order.

        Args:
            user_id: UUID of the user
            property_ids: De-duplicated property IDs
        """
        try:
            await self.db.execute(delete(Favorite).where(Favorite.user_id == user_id))
            base = utcnow()
            for position, property_id in enumerate(property_ids):
                saved_at = base + timedelta(microseconds=position)
                self.db.add(Favorite(
                    user_id=user_id,
                    property_id=property_id,
                    created_at=saved_at,
                    updated_at=saved_at
                ))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to replace favorites for user {user_id}: {e}")
            raise

