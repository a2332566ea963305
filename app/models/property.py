"""
Property model for rental listings.
Handles listing details, location, availability, rooms and image references.
"""

from sqlalchemy import (
    String, Text, Integer, Float, Numeric, Boolean, DateTime, JSON, Uuid,
    Enum as SQLEnum, Index, ForeignKey
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.utils.validators import ensure_utc
from datetime import datetime
from decimal import Decimal
import enum
import uuid
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.message import Message
    from app.models.favorite import Favorite


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class PropertyType(str, enum.Enum):
    """Kind of dwelling being listed."""
    APARTMENT = "apartment"
    STUDIO = "studio"


class GuestType(str, enum.Enum):
    """Tenants the landlord is willing to host."""
    FAMILY = "Family"
    BACHELORS = "Bachelors"
    GIRLS = "Girls"
    BOYS = "Boys"


class RoomStatus(str, enum.Enum):
    """Occupancy state of a single room."""
    AVAILABLE = "available"
    BOOKED = "booked"


class Property(Base):
    """
    Property model for managing rental listings.
    Owned by exactly one landlord; only that landlord may change it.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed listing description"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Monthly rent"
    )

    # Location
    address: Mapped[str] = mapped_column(String(255), nullable=False, comment="Street address")
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True, comment="City")
    state: Mapped[str] = mapped_column(String(100), nullable=False, comment="State or province")
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False, comment="Postal code")

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, values_callable=_enum_values),
        nullable=False,
        index=True,
        comment="apartment or studio"
    )

    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, comment="Number of bedrooms")
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, comment="Number of bathrooms")
    area: Mapped[float] = mapped_column(Float, nullable=False, comment="Floor area in square feet")

    max_guests: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Maximum number of occupants"
    )

    guest_type: Mapped[GuestType] = mapped_column(
        SQLEnum(GuestType, values_callable=_enum_values),
        nullable=False,
        comment="Tenant group the listing is open to"
    )

    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    rules: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # [{"url": ..., "public_id": ...}]
    images: Mapped[List[Dict[str, str]]] = mapped_column(JSON, nullable=False, default=list)

    # [{"room_name", "rent", "size", "amenities", "status", "description"}]
    rooms: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Availability
    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the listing is open for inquiries"
    )
    available_from: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    available_to: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    landlord_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning landlord"
    )

    landlord: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    messages: Mapped[List["Message"]] = relationship(
        "Message",
        back_populates="property",
        cascade="all, delete-orphan"
    )

    favorited_by: Mapped[List["Favorite"]] = relationship(
        "Favorite",
        back_populates="property",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, price={self.price})>"

    @property
    def location(self) -> Dict[str, str]:
        """Location as a nested mapping."""
        return {
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
        }

    @property
    def availability(self) -> Dict[str, Any]:
        """Availability as a nested mapping."""
        return {
            "is_available": self.is_available,
            "available_from": self.available_from,
            "available_to": self.available_to,
        }

    def validate_availability(self, changes: Optional[Dict[str, Any]] = None) -> None:
        """
        Validate the availability window, optionally with pending column changes applied.

        Args:
            changes: Column values about to be written

        Raises:
            ValueError: If availableTo does not come after availableFrom
        """
        changes = changes or {}
        start = ensure_utc(changes.get("available_from", self.available_from))
        end = ensure_utc(changes.get("available_to", self.available_to))
        if start is not None and end is not None and end <= start:
            raise ValueError("availableTo must be after availableFrom")

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        """Check whether the given user is this listing's landlord."""
        return self.landlord_id == user_id

    def to_dict(self, include_landlord: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_landlord: Whether to embed the landlord's public fields

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": float(self.price),
            "location": self.location,
            "property_type": self.property_type.value,
            "amenities": list(self.amenities or []),
            "images": list(self.images or []),
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area": self.area,
            "max_guests": self.max_guests,
            "guest_type": self.guest_type.value,
            "landlord_id": self.landlord_id,
            "availability": self.availability,
            "rules": list(self.rules or []),
            "rooms": list(self.rooms or []),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

        if include_landlord and self.landlord:
            result["landlord"] = self.landlord.to_public_dict()

        return result


# Listing searches filter on these together and sort newest first
search_index = Index(
    "idx_properties_search",
    Property.property_type,
    Property.price,
    Property.bedrooms,
    Property.max_guests
)

landlord_created_index = Index(
    "idx_properties_landlord_created",
    Property.landlord_id,
    Property.created_at.desc()
)
