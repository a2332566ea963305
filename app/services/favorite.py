"""
Favorite service for a user's saved properties.
Every operation is limited to the caller's own list.
"""

from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.favorite import FavoriteRepository
from app.repositories.property import PropertyRepository
from app.models.property import Property
from app.models.user import User
from app.utils.exceptions import ForbiddenError, PropertyNotFoundError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteService:
    """Favorite service for saving and listing properties."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    @staticmethod
    def ensure_self(user_id: uuid.UUID, current_user: User) -> None:
        """
        Reject access to another user's favorites.

        Raises:
            ForbiddenError: If the path user is not the caller
        """
        if user_id != current_user.id:
            logger.warning(f"User {current_user.id} tried to access favorites of {user_id}")
            raise ForbiddenError("Unauthorized")

    async def replace_favorites(
        self,
        user_id: uuid.UUID,
        property_ids: List[uuid.UUID],
        current_user: User
    ) -> List[uuid.UUID]:
        """
        Replace the whole saved list.

        Args:
            user_id: Owner of the list, must be the caller
            property_ids: New list; duplicates are dropped, order is kept
            current_user: Caller

        Returns:
            Saved property IDs after the change

        Raises:
            ValidationError: If any ID does not belong to a property
        """
        self.ensure_self(user_id, current_user)

        unique_ids = list(dict.fromkeys(property_ids))
        existing = set(await self.property_repo.get_existing_ids(unique_ids))
        unknown = [str(pid) for pid in unique_ids if pid not in existing]
        if unknown:
            raise ValidationError(
                "Some properties do not exist",
                field_errors=[{"field": "favorites", "message": f"Unknown property: {pid}"} for pid in unknown]
            )

        await self.favorite_repo.replace(user_id, unique_ids)
        logger.info(f"Favorites of user {user_id} replaced with {len(unique_ids)} properties")
        return await self.favorite_repo.get_property_ids(user_id)

    async def add_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID, current_user: User) -> List[uuid.UUID]:
        """
        Save one property. Saving it again changes nothing.

        Raises:
            PropertyNotFoundError: If the property does not exist
        """
        self.ensure_self(user_id, current_user)

        if not await self.property_repo.exists(property_id):
            raise PropertyNotFoundError(str(property_id))

        if await self.favorite_repo.add(user_id, property_id):
            logger.info(f"User {user_id} saved property {property_id}")
        return await self.favorite_repo.get_property_ids(user_id)

    async def remove_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID, current_user: User) -> List[uuid.UUID]:
        """Drop one saved property. Removing an unsaved property changes nothing."""
        self.ensure_self(user_id, current_user)

        if await self.favorite_repo.remove(user_id, property_id):
            logger.info(f"User {user_id} removed property {property_id} from favorites")
        return await self.favorite_repo.get_property_ids(user_id)

    async def get_favorites(
        self,
        user_id: uuid.UUID,
        current_user: User,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[uuid.UUID], List[Property], int]:
        """
        Get the saved IDs and one page of saved properties.

        Returns:
            Tuple of (all saved IDs, properties on the page, total saved)
        """
        self.ensure_self(user_id, current_user)

        ids = await self.favorite_repo.get_property_ids(user_id)
        properties, total = await self.favorite_repo.get_properties_page(user_id, skip=(page - 1) * limit, limit=limit)
        return ids, properties, total
