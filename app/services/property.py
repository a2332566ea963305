"""
Property service for managing listings with ownership rules.
Handles creation, search, partial updates, images, room status and similar listings.
"""

from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.property import PropertyRepository
from app.models.property import Property, RoomStatus
from app.models.user import User
from app.schemas.property import PropertyCreate, PropertyUpdate, PropertySearchFilters
from app.services.image import ImageService
from app.utils.exceptions import (
    NotFoundError,
    ForbiddenError,
    PropertyNotFoundError,
    OwnershipError,
    ValidationError
)
from app.utils.validators import ensure_utc
import uuid
import logging

logger = logging.getLogger(__name__)

# Candidates for similar listings: same city, same type, or priced within 30%
SIMILAR_CANDIDATE_PRICE_TOLERANCE = Decimal("0.3")
# Price band that earns the price bonus when ranking
SIMILAR_SCORE_PRICE_TOLERANCE = Decimal("0.2")

SAME_CITY_SCORE = 3
CLOSE_PRICE_SCORE = 2
SAME_TYPE_SCORE = 1


def similarity_score(target: Property, candidate: Property) -> int:
    """
    Score how alike two listings are.

    Args:
        target: Listing being viewed
        candidate: Listing to compare

    Returns:
        3 for the same city, plus 2 for a price within 20%, plus 1 for the same type
    """
    score = 0
    if candidate.city.strip().lower() == target.city.strip().lower():
        score += SAME_CITY_SCORE

    target_price = Decimal(str(target.price))
    if abs(Decimal(str(candidate.price)) - target_price) <= target_price * SIMILAR_SCORE_PRICE_TOLERANCE:
        score += CLOSE_PRICE_SCORE

    if candidate.property_type == target.property_type:
        score += SAME_TYPE_SCORE
    return score


def rank_similar_properties(target: Property, candidates: List[Property], limit: int = 3) -> List[Property]:
    """
    Order candidates by similarity score, newest first within a score.

    Args:
        target: Listing being viewed
        candidates: Listings to rank; the target itself is skipped
        limit: Maximum number of listings to return

    Returns:
        Up to limit listings, most similar first
    """
    scored = [
        (similarity_score(target, candidate), ensure_utc(candidate.created_at), candidate)
        for candidate in candidates
        if candidate.id != target.id
    ]
    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [candidate for _, _, candidate in scored[:limit]]


def _to_columns(values: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten validated request data into column values."""
    columns = dict(values)

    location = columns.pop("location", None)
    if location is not None:
        columns.update(location)

    availability = columns.pop("availability", None)
    if availability is not None:
        columns.update(availability)

    if "price" in columns:
        columns["price"] = Decimal(str(columns["price"]))

    return columns


class PropertyService:
    """
    Property service for managing listings.
    Only landlords create listings and only the owning landlord changes one.
    """

    def __init__(self, db_session: AsyncSession, image_service: Optional[ImageService] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.image_service = image_service or ImageService()

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a listing owned by the caller.

        Args:
            property_data: Validated listing data
            current_user: Landlord creating the listing

        Returns:
            Created property

        Raises:
            ForbiddenError: If the caller is not a landlord
        """
        if not current_user.is_landlord:
            logger.warning(f"User {current_user.id} with role {current_user.role.value} tried to create a property")
            raise ForbiddenError("Only landlords can create properties")

        values = self._dump(property_data)
        values["landlord_id"] = current_user.id
        values["images"] = []

        property_obj = await self.property_repo.create(_to_columns(values))
        logger.info(f"Property created by {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def list_properties(
        self,
        filters: PropertySearchFilters,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        Search listings, newest first.

        Args:
            filters: Search criteria
            page: Page number, starting at 1
            limit: Items per page

        Returns:
            Tuple of (properties on the page, total matches)
        """
        skip = (page - 1) * limit
        return await self.property_repo.search_properties(filters, skip=skip, limit=limit)

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get a listing by ID.

        Raises:
            PropertyNotFoundError: If the listing does not exist
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(property_id))
        return property_obj

    async def get_landlord_properties(self, current_user: User) -> List[Property]:
        """Get the caller's own listings, newest first."""
        return await self.property_repo.get_properties_by_landlord(current_user.id)

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Apply a partial update to an owned listing.

        Args:
            property_id: Listing to update
            property_data: Fields to change
            current_user: Caller, who must own the listing

        Returns:
            Updated property
        """
        property_obj = await self._get_owned_property(property_id, current_user)

        changes = self._dump(property_data, exclude_unset=True)
        if not changes:
            return property_obj

        columns = _to_columns(changes)
        try:
            property_obj.validate_availability(columns)
        except ValueError as e:
            raise ValidationError.for_field("availability", str(e))

        updated = await self.property_repo.update(property_obj, columns)
        logger.info(f"Property {property_id} updated by {current_user.email}: {sorted(changes)}")
        return updated

    async def replace_images(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile],
        current_user: User
    ) -> Property:
        """
        Replace all images of an owned listing, removing the old files.

        Returns:
            Updated property
        """
        property_obj = await self._get_owned_property(property_id, current_user)
        previous = list(property_obj.images or [])

        stored = await self.image_service.store_images(property_obj.id, files)
        try:
            updated = await self.property_repo.update(property_obj, {"images": stored})
        except Exception:
            self.image_service.remove_images(stored)
            raise

        self.image_service.remove_images(previous)
        logger.info(f"Replaced {len(previous)} images with {len(stored)} on property {property_id}")
        return updated

    async def append_images(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile],
        current_user: User
    ) -> Property:
        """
        Add images to an owned listing without exceeding the per-listing limit.

        Returns:
            Updated property
        """
        property_obj = await self._get_owned_property(property_id, current_user)
        current = list(property_obj.images or [])

        stored = await self.image_service.store_images(property_obj.id, files, existing_count=len(current))
        try:
            updated = await self.property_repo.update(property_obj, {"images": current + stored})
        except Exception:
            self.image_service.remove_images(stored)
            raise

        logger.info(f"Added {len(stored)} images to property {property_id}")
        return updated

    async def delete_image(self, property_id: uuid.UUID, public_id: str, current_user: User) -> Property:
        """
        Remove one image from an owned listing.

        Raises:
            NotFoundError: If the listing has no image with that public_id
        """
        property_obj = await self._get_owned_property(property_id, current_user)
        images = list(property_obj.images or [])

        remaining = [image for image in images if image.get("public_id") != public_id]
        if len(remaining) == len(images):
            raise NotFoundError("Image", public_id)

        updated = await self.property_repo.update(property_obj, {"images": remaining})
        self.image_service.remove_images([{"public_id": public_id}])
        logger.info(f"Removed image {public_id} from property {property_id}")
        return updated

    async def set_room_status(
        self,
        property_id: uuid.UUID,
        room_index: int,
        status: RoomStatus,
        current_user: User
    ) -> Property:
        """
        Mark one room of an owned listing as available or booked.

        Args:
            property_id: Listing the room belongs to
            room_index: Zero-based position in the room list
            status: New room status
            current_user: Caller, who must own the listing

        Returns:
            Updated property

        Raises:
            NotFoundError: If the index is outside the room list
        """
        property_obj = await self._get_owned_property(property_id, current_user)
        rooms = [dict(room) for room in (property_obj.rooms or [])]

        if room_index < 0 or room_index >= len(rooms):
            raise NotFoundError("Room", str(room_index))

        rooms[room_index]["status"] = status.value
        updated = await self.property_repo.update(property_obj, {"rooms": rooms})
        logger.info(f"Room {room_index} of property {property_id} set to {status.value}")
        return updated

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> None:
        """Delete an owned listing together with its messages, favorite links and image files."""
        property_obj = await self._get_owned_property(property_id, current_user)
        images = list(property_obj.images or [])

        await self.property_repo.delete(property_obj)
        self.image_service.remove_property_images(property_id, images)

        logger.info(f"Property {property_id} deleted by {current_user.email}")

    async def toggle_availability(self, property_id: uuid.UUID, current_user: User) -> Property:
        """
        Flip whether an owned listing is available.

        Returns:
            Updated property
        """
        property_obj = await self._get_owned_property(property_id, current_user)
        updated = await self.property_repo.update(property_obj, {"is_available": not property_obj.is_available})
        logger.info(f"Property {property_id} availability set to {updated.is_available}")
        return updated

    async def get_similar_properties(self, property_id: uuid.UUID, limit: int = 3) -> List[Property]:
        """
        Get listings most like the given one.

        Args:
            property_id: Listing being viewed
            limit: Maximum number of listings to return

        Returns:
            Ranked similar listings
        """
        target = await self.get_property(property_id)
        candidates = await self.property_repo.get_similar_candidates(target, SIMILAR_CANDIDATE_PRICE_TOLERANCE)
        return rank_similar_properties(target, candidates, limit)

    async def _get_owned_property(self, property_id: uuid.UUID, current_user: User) -> Property:
        property_obj = await self.get_property(property_id)
        if not property_obj.is_owned_by(current_user.id):
            logger.warning(f"User {current_user.id} tried to modify property {property_id} owned by {property_obj.landlord_id}")
            raise OwnershipError()
        return property_obj

    @staticmethod
    def _dump(data, exclude_unset: bool = False) -> Dict[str, Any]:
        """Request data as plain values; rooms are stored as JSON so enums become strings."""
        values = data.model_dump(exclude_unset=exclude_unset)
        if "rooms" in values:
            values["rooms"] = [room.model_dump(mode="json") for room in data.rooms]
        return values
