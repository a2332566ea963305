"""
Pydantic schemas for request/response validation.
"""

# Shared envelopes
from .common import (
    CamelModel,
    DataResponse,
    PaginatedResponse,
    PaginationMeta,
    MessageOnlyResponse
)

# Authentication schemas
from .auth import (
    LoginRequest,
    AuthPayload
)

# User schemas
from .user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserPublic,
    PasswordChangeRequest
)

# Property schemas
from .property import (
    LocationSchema,
    AvailabilitySchema,
    RoomSchema,
    ImageSchema,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySearchFilters,
    RoomStatusUpdate
)

# Message schemas
from .message import (
    MessageCreate,
    MessageReply,
    MessageResponse
)

# Favorite schemas
from .favorite import (
    FavoritesReplaceRequest,
    FavoriteAddRequest,
    FavoritesResponse,
    FavoritesPageResponse
)

# Review schemas
from .review import (
    ReviewWrite,
    ReviewResponse
)

__all__ = [
    # Envelopes
    "CamelModel",
    "DataResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "MessageOnlyResponse",

    # Authentication
    "LoginRequest",
    "AuthPayload",

    # User
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserPublic",
    "PasswordChangeRequest",

    # Property
    "LocationSchema",
    "AvailabilitySchema",
    "RoomSchema",
    "ImageSchema",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertySearchFilters",
    "RoomStatusUpdate",

    # Message
    "MessageCreate",
    "MessageReply",
    "MessageResponse",

    # Favorite
    "FavoritesReplaceRequest",
    "FavoriteAddRequest",
    "FavoritesResponse",
    "FavoritesPageResponse",

    # Review
    "ReviewWrite",
    "ReviewResponse",
]
