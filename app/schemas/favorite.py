"""
Pydantic schemas for favorites requests and responses.
"""

from pydantic import Field
from typing import List
import uuid
from app.schemas.common import CamelModel, PaginationMeta
from app.schemas.property import PropertyResponse


class FavoritesReplaceRequest(CamelModel):
    """Schema for replacing the whole favorites set."""

    favorites: List[uuid.UUID] = Field(default_factory=list, description="Property IDs in display order")


class FavoriteAddRequest(CamelModel):
    """Schema for saving one property."""

    property_id: uuid.UUID


class FavoritesResponse(CamelModel):
    """The caller's saved property IDs."""

    success: bool = True
    favorites: List[uuid.UUID]


class FavoritesPageResponse(CamelModel):
    """The caller's saved property IDs plus one page of populated properties."""

    success: bool = True
    favorites: List[uuid.UUID]
    properties: List[PropertyResponse]
    pagination: PaginationMeta
