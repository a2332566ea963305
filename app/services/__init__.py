"""
Service layer for business logic implementation.
Services enforce roles and ownership and raise typed API exceptions.
"""

from .auth import AuthService
from .property import PropertyService, rank_similar_properties
from .message import MessageService
from .favorite import FavoriteService
from .review import ReviewService
from .image import ImageService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "rank_similar_properties",
    "MessageService",
    "FavoriteService",
    "ReviewService",
    "ImageService",
    "ErrorHandlerService",
]
