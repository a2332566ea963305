"""
Repository layer for data access operations.
Each repository wraps one model and commits its own writes.
"""

from app.repositories.base import BaseRepository
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.message import MessageRepository
from app.repositories.favorite import FavoriteRepository
from app.repositories.review import ReviewRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "MessageRepository",
    "FavoriteRepository",
    "ReviewRepository",
]
