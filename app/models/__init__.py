"""
Database models for the RishStay API.
Includes User, Property, Message, Review and Favorite models with relationships and validation.
"""

from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, GuestType, RoomStatus
from app.models.message import Message, InquiryType, MessageStatus
from app.models.review import Review
from app.models.favorite import Favorite

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyType",
    "GuestType",
    "RoomStatus",
    "Message",
    "InquiryType",
    "MessageStatus",
    "Review",
    "Favorite",
]
