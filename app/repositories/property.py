"""
Property repository for listing storage, search and filtering.
Provides filtered, paginated listing queries and candidate lookups for similar listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func, desc
from app.repositories.base import BaseRepository
from app.models.property import Property
from app.schemas.property import PropertySearchFilters
from typing import List, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


def _contains_pattern(term: str) -> str:
    """LIKE pattern matching the term anywhere, with wildcards in the term escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination, newest first.

        Args:
            filters: Search criteria
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (properties list, total count)
        """
        conditions = self._build_filter_conditions(filters)

        query = select(Property)
        count_query = select(func.count(Property.id))
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        total_count = (await self.db.execute(count_query)).scalar_one()

        query = query.order_by(desc(Property.created_at)).offset(skip).limit(limit)
        result = await self.db.execute(query)
        properties = list(result.scalars().all())

        logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
        return properties, total_count

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.

        Args:
            filters: Search criteria

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        # Case-insensitive partial matches
        if filters.address:
            conditions.append(Property.address.ilike(_contains_pattern(filters.address), escape="\\"))
        if filters.city:
            conditions.append(Property.city.ilike(_contains_pattern(filters.city), escape="\\"))

        if filters.property_type:
            conditions.append(Property.property_type == filters.property_type)

        # Price range
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        # Minimums
        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.bedrooms)
        if filters.guests is not None:
            conditions.append(Property.max_guests >= filters.guests)

        if filters.guest_type:
            conditions.append(Property.guest_type == filters.guest_type)

        if filters.available_only:
            conditions.append(Property.is_available.is_(True))

        return conditions

    async def get_properties_by_landlord(self, landlord_id: uuid.UUID) -> List[Property]:
        """
        Get every property owned by a landlord, newest first.

        Args:
            landlord_id: UUID of the landlord

        Returns:
            List of properties
        """
        query = (
            select(Property)
            .where(Property.landlord_id == landlord_id)
            .order_by(desc(Property.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_similar_candidates(self, target: Property, price_tolerance: Decimal) -> List[Property]:
        """
        Get properties sharing the target's city or type, or priced near it.

        Args:
            target: Property to compare against
            price_tolerance: Allowed price deviation as a fraction of the target price

        Returns:
            Candidate properties excluding the target, newest first
        """
        price = Decimal(str(target.price))
        spread = price * price_tolerance
        query = (
            select(Property)
            .where(
                Property.id != target.id,
                or_(
                    func.lower(Property.city) == target.city.lower(),
                    Property.price.between(price - spread, price + spread),
                    Property.property_type == target.property_type,
                )
            )
            .order_by(desc(Property.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_existing_ids(self, property_ids: List[uuid.UUID]) -> List[uuid.UUID]:
        """Return which of the given IDs belong to stored properties."""
        if not property_ids:
            return []
        result = await self.db.execute(select(Property.id).where(Property.id.in_(property_ids)))
        return list(result.scalars().all())
