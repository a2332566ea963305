"""
Property API endpoints for listing management, search and images.
Reads are public; every change requires the owning landlord.
"""

from fastapi import APIRouter, Depends, status, Query, Path, File, UploadFile
from typing import Optional, List
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.models.property import Property, PropertyType, GuestType
from app.services.property import PropertyService
from app.schemas.common import DataResponse, PaginatedResponse, PaginationMeta, MessageOnlyResponse
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySearchFilters,
    RoomStatusUpdate
)
from app.schemas.error import get_crud_error_responses, get_public_error_responses, get_auth_error_responses
from app.utils.dependencies import get_current_user, get_property_service


router = APIRouter(prefix="/property", tags=["Properties"])


def _to_response(property_obj: Property, include_landlord: bool = False) -> PropertyResponse:
    return PropertyResponse.model_validate(property_obj.to_dict(include_landlord=include_landlord))


@router.post(
    "/create",
    response_model=DataResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a listing owned by the signed-in landlord. Images are uploaded separately.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """
    Create a new property listing.

    Args:
        property_data: Property creation data
        current_user: Current authenticated user
        property_service: Property service instance

    Returns:
        Created property

    Raises:
        ForbiddenError: If the caller is not a landlord
    """
    property_obj = await property_service.create_property(property_data, current_user)
    return DataResponse(message="Property created successfully", data=_to_response(property_obj))


@router.get(
    "/all",
    response_model=PaginatedResponse[PropertyResponse],
    summary="List properties with search and filtering",
    description="Paginated listings, newest first, narrowed by any combination of filters",
    responses=get_public_error_responses()
)
async def list_properties(
    address: Optional[str] = Query(None, description="Case-insensitive address substring"),
    city: Optional[str] = Query(None, description="Case-insensitive city substring"),
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    bedrooms: Optional[int] = Query(None, ge=0, description="Minimum number of bedrooms"),
    guests: Optional[int] = Query(None, ge=1, description="Minimum guest capacity"),
    guest_type: Optional[GuestType] = Query(None, alias="guestType"),
    available_only: bool = Query(False, alias="availableOnly"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"),
    property_service: PropertyService = Depends(get_property_service)
) -> PaginatedResponse[PropertyResponse]:
    """
    Search listings.

    Returns:
        One page of matching properties with pagination metadata
    """
    filters = PropertySearchFilters(
        address=address,
        city=city,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        guests=guests,
        guest_type=guest_type,
        available_only=available_only
    )

    properties, total = await property_service.list_properties(filters, page=page, limit=limit)
    return PaginatedResponse(
        data=[_to_response(p) for p in properties],
        pagination=PaginationMeta.build(page, limit, total)
    )


@router.get(
    "/myproperties",
    response_model=DataResponse[List[PropertyResponse]],
    summary="List my properties",
    responses=get_auth_error_responses()
)
async def my_properties(
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[List[PropertyResponse]]:
    """Listings owned by the caller, newest first."""
    properties = await property_service.get_landlord_properties(current_user)
    return DataResponse(data=[_to_response(p) for p in properties])


@router.put(
    "/update/{property_id}",
    response_model=DataResponse[PropertyResponse],
    summary="Update property",
    description="Partial update restricted to listing fields. Unknown fields and nulls are rejected.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """
    Update an owned listing.

    Raises:
        PropertyNotFoundError: If the property doesn't exist
        OwnershipError: If the caller is not the landlord
    """
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return DataResponse(message="Property updated successfully", data=_to_response(property_obj))


@router.delete(
    "/delete/{property_id}",
    response_model=MessageOnlyResponse,
    summary="Delete property",
    description="Delete a listing with its images, messages and favorite links",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageOnlyResponse:
    """Delete an owned listing."""
    await property_service.delete_property(property_id, current_user)
    return MessageOnlyResponse(message="Property deleted successfully")


@router.put(
    "/toggle-availability/{property_id}",
    response_model=DataResponse[PropertyResponse],
    summary="Toggle availability",
    responses=get_crud_error_responses()
)
async def toggle_availability(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """Flip availability.isAvailable of an owned listing."""
    property_obj = await property_service.toggle_availability(property_id, current_user)
    state = "available" if property_obj.is_available else "unavailable"
    return DataResponse(message=f"Property marked as {state}", data=_to_response(property_obj))


@router.get(
    "/{property_id}",
    response_model=DataResponse[PropertyResponse],
    summary="Get property by ID",
    description="A single listing with its landlord's contact details",
    responses=get_public_error_responses()
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """
    Get a listing.

    Raises:
        PropertyNotFoundError: If the property doesn't exist
    """
    property_obj = await property_service.get_property(property_id)
    return DataResponse(data=_to_response(property_obj, include_landlord=True))


@router.get(
    "/{property_id}/similar",
    response_model=DataResponse[List[PropertyResponse]],
    summary="Similar properties",
    description="Listings ranked by shared city, close price and same type",
    responses=get_public_error_responses()
)
async def similar_properties(
    property_id: UUID = Path(..., description="Property ID"),
    limit: int = Query(3, ge=1, le=20, description="Maximum number of listings"),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[List[PropertyResponse]]:
    """Listings most like the given one."""
    properties = await property_service.get_similar_properties(property_id, limit)
    return DataResponse(data=[_to_response(p) for p in properties])


@router.put(
    "/{property_id}/images",
    response_model=DataResponse[PropertyResponse],
    summary="Replace images",
    description="Upload 1-10 images that replace the listing's current images",
    responses=get_crud_error_responses()
)
async def replace_images(
    property_id: UUID = Path(..., description="Property ID"),
    images: List[UploadFile] = File(..., description="Image files"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """Replace all images of an owned listing."""
    property_obj = await property_service.replace_images(property_id, images, current_user)
    return DataResponse(message="Images updated successfully", data=_to_response(property_obj))


@router.post(
    "/{property_id}/images",
    response_model=DataResponse[PropertyResponse],
    summary="Add images",
    description="Upload images appended to the listing, up to 10 in total",
    responses=get_crud_error_responses()
)
async def append_images(
    property_id: UUID = Path(..., description="Property ID"),
    images: List[UploadFile] = File(..., description="Image files"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """Add images to an owned listing."""
    property_obj = await property_service.append_images(property_id, images, current_user)
    return DataResponse(message="Images added successfully", data=_to_response(property_obj))


@router.delete(
    "/{property_id}/images/{public_id:path}",
    response_model=DataResponse[PropertyResponse],
    summary="Delete image",
    responses=get_crud_error_responses()
)
async def delete_image(
    public_id: str,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """Remove one image from an owned listing."""
    property_obj = await property_service.delete_image(property_id, public_id, current_user)
    return DataResponse(message="Image deleted successfully", data=_to_response(property_obj))


@router.put(
    "/{property_id}/rooms/{room_index}/status",
    response_model=DataResponse[PropertyResponse],
    summary="Set room status",
    description="Mark one room, addressed by its position, as available or booked",
    responses=get_crud_error_responses()
)
async def set_room_status(
    status_update: RoomStatusUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    room_index: int = Path(..., description="Zero-based room position"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> DataResponse[PropertyResponse]:
    """Change one room's status on an owned listing."""
    property_obj = await property_service.set_room_status(
        property_id, room_index, status_update.status, current_user
    )
    return DataResponse(message="Room status updated", data=_to_response(property_obj))
