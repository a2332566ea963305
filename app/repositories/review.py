"""
Review repository for platform feedback.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from app.repositories.base import BaseRepository
from app.models.review import Review
from typing import List, Optional
import uuid


class ReviewRepository(BaseRepository[Review]):
    """Repository for platform reviews."""

    def __init__(self, db: AsyncSession):
        super().__init__(Review, db)

    async def get_latest(self, limit: int = 6) -> List[Review]:
        """
        Get the most recent reviews.

        Args:
            limit: Maximum number of reviews to return

        Returns:
            Reviews, newest first
        """
        query = select(Review).order_by(desc(Review.created_at), desc(Review.id)).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[Review]:
        """Get the review written by a user, if any."""
        result = await self.db.execute(select(Review).where(Review.user_id == user_id))
        return result.scalar_one_or_none()
