"""
Authentication utilities for token management and password hashing.
Tokens carry the user identifier as {"user": {"id": ...}}.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
import uuid


# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)


class TokenPayload:
    """Decoded token payload."""

    def __init__(self, user_id: uuid.UUID, exp: datetime):
        self.user_id = user_id
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """
        Create TokenPayload from a decoded claims dictionary.

        Raises:
            JWTError: If the claims do not carry a valid user id and expiry
        """
        try:
            user_id = uuid.UUID(str(data["user"]["id"]))
            exp = datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise JWTError(f"Malformed token payload: {e}")

        return cls(user_id=user_id, exp=exp)


def create_access_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: User's UUID
        expires_delta: Optional custom expiration time

    Returns:
        Encoded token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.access_token_expire_days))

    to_encode = {
        "user": {"id": str(user_id)},
        "exp": expire,
        "iat": now,
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def verify_token(token: str) -> TokenPayload:
    """
    Verify and decode an access token.

    Args:
        token: Encoded token string

    Returns:
        Decoded token payload

    Raises:
        JWTError: If the token is invalid, tampered with, or expired
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require_exp": True}
    )
    return TokenPayload.from_dict(payload)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)
