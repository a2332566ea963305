"""
Pydantic schemas for property requests and responses.
Handles listing creation, partial updates, rooms, availability and search filters.
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid
from app.models.property import PropertyType, GuestType, RoomStatus
from app.schemas.common import CamelModel
from app.schemas.user import UserPublic
from app.utils.validators import clean_required_text, clean_string_list, ensure_utc


class LocationSchema(CamelModel):
    """Street address of a listing."""

    address: str = Field(..., min_length=1, max_length=255, examples=["12 MG Road"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Bengaluru"])
    state: str = Field(..., min_length=1, max_length=100, examples=["Karnataka"])
    zip_code: str = Field(..., min_length=1, max_length=20, examples=["560001"])

    @field_validator("address", "city", "state", "zip_code")
    @classmethod
    def strip_parts(cls, v, info):
        return clean_required_text(v, info.field_name)


class AvailabilitySchema(CamelModel):
    """Availability window; availableTo must follow availableFrom."""

    is_available: bool = True
    available_from: Optional[datetime] = None
    available_to: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_window(self):
        """availableTo must come after availableFrom when both are given."""
        start = ensure_utc(self.available_from)
        end = ensure_utc(self.available_to)
        if start is not None and end is not None and end <= start:
            raise ValueError("availableTo must be after availableFrom")
        return self


class RoomSchema(CamelModel):
    """A rentable room inside a listing."""

    room_name: str = Field(..., min_length=1, max_length=100, examples=["Room A"])
    rent: float = Field(..., ge=0, examples=[8000])
    size: float = Field(0, ge=0, description="Room size in square feet", examples=[120])
    amenities: List[str] = Field(default_factory=list)
    status: RoomStatus = RoomStatus.AVAILABLE
    description: str = Field("", max_length=2000)

    @field_validator("room_name")
    @classmethod
    def validate_room_name(cls, v):
        return clean_required_text(v, "Room name")

    @field_validator("amenities")
    @classmethod
    def clean_amenities(cls, v):
        return clean_string_list(v)


class ImageSchema(CamelModel):
    """Stored image reference."""

    url: str
    public_id: str


class PropertyBase(CamelModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Listing title",
        examples=["Sunny 2BHK near the metro"]
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Detailed listing description",
        examples=["Bright apartment with balcony, five minutes from the station."]
    )

    price: Decimal = Field(
        ...,
        ge=0,
        le=Decimal("9999999999.99"),
        max_digits=12,
        decimal_places=2,
        description="Monthly rent",
        examples=[15000]
    )

    location: LocationSchema

    property_type: PropertyType = Field(..., description="apartment or studio", examples=["apartment"])

    bedrooms: int = Field(..., ge=0, le=50, description="Number of bedrooms", examples=[2])
    bathrooms: int = Field(..., ge=0, le=50, description="Number of bathrooms", examples=[1])
    area: float = Field(..., ge=0, description="Floor area in square feet", examples=[850])
    max_guests: int = Field(..., ge=1, le=100, description="Maximum occupants", examples=[4])
    guest_type: GuestType = Field(..., description="Tenant group the listing is open to", examples=["Family"])

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Validate and clean title."""
        return clean_required_text(v, "Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        """Validate and clean description."""
        return clean_required_text(v, "Description")


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""

    amenities: List[str] = Field(default_factory=list, examples=[["WiFi", "Parking"]])
    rules: List[str] = Field(default_factory=list, examples=[["No smoking"]])
    rooms: List[RoomSchema] = Field(default_factory=list)
    availability: AvailabilitySchema = Field(default_factory=AvailabilitySchema)

    @field_validator("amenities", "rules")
    @classmethod
    def clean_lists(cls, v):
        return clean_string_list(v)


class PropertyUpdate(CamelModel):
    """
    Schema for partial property updates.

    Only the listed fields may change. Unknown keys, explicit nulls and
    malformed nested objects are rejected rather than skipped.
    """

    model_config = {"extra": "forbid"}

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    price: Optional[Decimal] = Field(None, ge=0, le=Decimal("9999999999.99"), max_digits=12, decimal_places=2)
    location: Optional[LocationSchema] = None
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    area: Optional[float] = Field(None, ge=0)
    max_guests: Optional[int] = Field(None, ge=1, le=100)
    guest_type: Optional[GuestType] = None
    amenities: Optional[List[str]] = None
    rules: Optional[List[str]] = None
    availability: Optional[AvailabilitySchema] = None
    rooms: Optional[List[RoomSchema]] = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v, info):
        if v is None:
            return v
        return clean_required_text(v, info.field_name)

    @field_validator("amenities", "rules")
    @classmethod
    def clean_lists(cls, v):
        if v is None:
            return v
        return clean_string_list(v)

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        """A field that is sent must carry a value."""
        for field_name in self.model_fields_set:
            if getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self


class RoomStatusUpdate(CamelModel):
    """Schema for changing one room's status."""

    status: RoomStatus


class PropertyResponse(CamelModel):
    """Schema for property responses."""

    id: uuid.UUID
    title: str
    description: str
    price: float
    location: LocationSchema
    property_type: PropertyType
    amenities: List[str]
    images: List[ImageSchema]
    bedrooms: int
    bathrooms: int
    area: float
    max_guests: int
    guest_type: GuestType
    landlord_id: uuid.UUID
    landlord: Optional[UserPublic] = None
    availability: AvailabilitySchema
    rules: List[str]
    rooms: List[RoomSchema]
    created_at: datetime
    updated_at: datetime


class PropertySearchFilters(CamelModel):
    """Optional listing filters; all given filters must match."""

    address: Optional[str] = None
    city: Optional[str] = None
    property_type: Optional[PropertyType] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    guests: Optional[int] = Field(None, ge=1)
    guest_type: Optional[GuestType] = None
    available_only: bool = False

    @field_validator("address", "city")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return v
        return v.strip() or None

    @model_validator(mode="after")
    def validate_price_range(self):
        """minPrice may not exceed maxPrice."""
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice cannot be greater than maxPrice")
        return self
