"""
Favorites API endpoints for a user's saved properties.
A user can only read and change their own favorites.
"""

from fastapi import APIRouter, Depends, Query, Path
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.services.favorite import FavoriteService
from app.schemas.common import PaginationMeta
from app.schemas.favorite import (
    FavoritesReplaceRequest,
    FavoriteAddRequest,
    FavoritesResponse,
    FavoritesPageResponse
)
from app.schemas.property import PropertyResponse
from app.schemas.error import get_crud_error_responses
from app.utils.dependencies import get_current_user, get_favorite_service


router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get(
    "/{user_id}",
    response_model=FavoritesPageResponse,
    summary="Get favorites",
    description="Saved property IDs plus one page of the saved properties",
    responses=get_crud_error_responses()
)
async def get_favorites(
    user_id: UUID = Path(..., description="User ID; must be the caller"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoritesPageResponse:
    """Read the caller's favorites."""
    ids, properties, total = await favorite_service.get_favorites(user_id, current_user, page=page, limit=limit)
    return FavoritesPageResponse(
        favorites=ids,
        properties=[PropertyResponse.model_validate(p.to_dict()) for p in properties],
        pagination=PaginationMeta.build(page, limit, total)
    )


@router.put(
    "/{user_id}",
    response_model=FavoritesResponse,
    summary="Replace favorites",
    responses=get_crud_error_responses()
)
async def replace_favorites(
    request: FavoritesReplaceRequest,
    user_id: UUID = Path(..., description="User ID; must be the caller"),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoritesResponse:
    """
    Replace the caller's whole favorites list.

    Raises:
        ForbiddenError: If the path user is not the caller
        ValidationError: If any ID is not a property
    """
    favorites = await favorite_service.replace_favorites(user_id, request.favorites, current_user)
    return FavoritesResponse(favorites=favorites)


@router.post(
    "/{user_id}/add",
    response_model=FavoritesResponse,
    summary="Add favorite",
    responses=get_crud_error_responses()
)
async def add_favorite(
    request: FavoriteAddRequest,
    user_id: UUID = Path(..., description="User ID; must be the caller"),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoritesResponse:
    """Save one property."""
    favorites = await favorite_service.add_favorite(user_id, request.property_id, current_user)
    return FavoritesResponse(favorites=favorites)


@router.delete(
    "/{user_id}/remove/{property_id}",
    response_model=FavoritesResponse,
    summary="Remove favorite",
    responses=get_crud_error_responses()
)
async def remove_favorite(
    user_id: UUID = Path(..., description="User ID; must be the caller"),
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoritesResponse:
    """Drop one saved property."""
    favorites = await favorite_service.remove_favorite(user_id, property_id, current_user)
    return FavoritesResponse(favorites=favorites)
