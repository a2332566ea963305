"""
Pydantic schemas for inquiry messages.
Handles sending, replying and the populated message view.
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
import uuid
from app.models.message import InquiryType, MessageStatus
from app.schemas.common import CamelModel
from app.schemas.property import LocationSchema
from app.utils.validators import CONTACT_PHONE_PATTERN, clean_required_text, normalize_phone


class MessageCreate(CamelModel):
    """Schema for sending an inquiry about a property."""

    property_id: uuid.UUID = Field(..., description="Property being asked about")
    subject: str = Field(..., min_length=1, max_length=200, examples=["Is the flat still available?"])
    message: str = Field(..., min_length=1, max_length=5000, examples=["I'd like to visit this weekend."])
    inquiry_type: InquiryType = Field(InquiryType.GENERAL, examples=["viewing"])
    preferred_date: Optional[datetime] = Field(None, description="Must be in the future")
    phone: Optional[str] = Field(None, examples=["+919876543210"])

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, v):
        return clean_required_text(v, "Subject")

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        return clean_required_text(v, "Message")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        """Optional contact number: 7 to 15 digits with an optional leading +."""
        if v is None or not v.strip():
            return None
        phone = normalize_phone(v)
        if not CONTACT_PHONE_PATTERN.match(phone):
            raise ValueError("Enter a valid phone number")
        return phone


class MessageReply(CamelModel):
    """Schema for answering a received message."""

    message: str = Field(..., min_length=1, max_length=5000)
    subject: Optional[str] = Field(None, max_length=200)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        return clean_required_text(v, "Message")

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, v):
        if v is None:
            return v
        return v.strip() or None


class MessageParty(CamelModel):
    """Sender or recipient as shown on a message."""

    id: uuid.UUID
    name: Optional[str] = None
    email: Optional[str] = None


class MessageProperty(CamelModel):
    """Property summary shown on a message."""

    id: uuid.UUID
    title: Optional[str] = None
    location: Optional[LocationSchema] = None


class MessageResponse(CamelModel):
    """Schema for message responses."""

    id: uuid.UUID
    sender: MessageParty
    recipient: MessageParty
    property: MessageProperty
    reply_to_id: Optional[uuid.UUID] = None
    subject: str
    message: str
    inquiry_type: InquiryType
    preferred_date: Optional[datetime] = None
    phone: Optional[str] = None
    status: MessageStatus
    created_at: datetime
    updated_at: datetime
