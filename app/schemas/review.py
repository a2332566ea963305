"""
Pydantic schemas for platform reviews.
"""

from pydantic import Field, field_validator
from datetime import datetime
import uuid
from app.schemas.common import CamelModel


class ReviewWrite(CamelModel):
    """Schema for creating or editing a review."""

    comment: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Review text (1-1000 characters)",
        examples=["Found my flat in two days. Smooth experience."]
    )

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        comment = v.strip()
        if not comment:
            raise ValueError("Comment is required and must be less than 1000 characters")
        return comment


class ReviewResponse(CamelModel):
    """Schema for review responses."""

    id: uuid.UUID
    user_id: uuid.UUID
    comment: str
    user_name: str
    user_role: str
    created_at: datetime
    updated_at: datetime
