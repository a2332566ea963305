"""
Pydantic schemas for user requests and responses.
Handles signup, profile updates and password changes.
"""

from pydantic import EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
import uuid
from app.models.user import UserRole
from app.schemas.common import CamelModel
from app.utils.validators import USER_PHONE_PATTERN, clean_required_text, normalize_phone


def _validate_user_phone(v: str) -> str:
    phone = normalize_phone(v)
    if not USER_PHONE_PATTERN.match(phone):
        raise ValueError("Enter a valid phone number (10 digits)")
    return phone


def _validate_user_name(v: str) -> str:
    name = clean_required_text(v, "Name")
    if len(name) < 3:
        raise ValueError("Name must be at least 3 characters")
    return name


class UserBase(CamelModel):
    """Base user schema with common fields."""

    name: str = Field(
        ...,
        min_length=3,
        max_length=100,
        description="User's display name",
        examples=["Asha Verma"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["asha@example.com"]
    )

    phone_no: str = Field(
        ...,
        description="Ten digit phone number",
        examples=["9876543210"]
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        return _validate_user_name(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("phone_no")
    @classmethod
    def validate_phone_no(cls, v):
        """Phone numbers are exactly ten digits."""
        return _validate_user_phone(v)


class UserCreate(UserBase):
    """Schema for signing up."""

    password: str = Field(
        ...,
        min_length=5,
        max_length=128,
        description="Password (minimum 5 characters)",
        examples=["secret123"]
    )

    role: UserRole = Field(
        ...,
        description="landlord or tenant",
        examples=["tenant"]
    )


class UserUpdate(CamelModel):
    """Schema for editing the caller's own profile."""

    model_config = {"extra": "forbid"}

    name: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    phone_no: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return _validate_user_name(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v

    @field_validator("phone_no")
    @classmethod
    def validate_phone_no(cls, v):
        if v is None:
            return v
        return _validate_user_phone(v)

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        """A field that is sent must carry a value."""
        for field_name in self.model_fields_set:
            if getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self


class PasswordChangeRequest(CamelModel):
    """Schema for changing the caller's password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ...,
        min_length=5,
        max_length=128,
        description="New password (minimum 5 characters)"
    )


class UserResponse(CamelModel):
    """Schema for user responses."""

    id: uuid.UUID
    name: str
    email: str
    phone_no: str
    role: UserRole
    favorites: List[uuid.UUID] = Field(default_factory=list, description="Saved property IDs")
    created_at: datetime


class UserPublic(CamelModel):
    """Fields of a user visible on records that reference them."""

    id: uuid.UUID
    name: Optional[str] = None
    email: Optional[str] = None
    phone_no: Optional[str] = None
