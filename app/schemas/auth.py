"""
Pydantic schemas for authentication requests and responses.
Handles login and the token-plus-user payload returned on signup and login.
"""

from pydantic import EmailStr, Field, field_validator
from app.schemas.common import CamelModel
from app.schemas.user import UserResponse


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["asha@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password",
        examples=["secret123"]
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class AuthPayload(CamelModel):
    """Token and profile returned by signup and login."""

    authtoken: str = Field(
        ...,
        description="Signed token to send in the auth-token header",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    user: UserResponse
