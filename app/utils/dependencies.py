"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
import uuid
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.auth import AuthService
from app.services.property import PropertyService
from app.services.message import MessageService
from app.services.favorite import FavoriteService
from app.services.review import ReviewService
from app.services.image import ImageService
from app.utils.auth import verify_token
from app.utils.exceptions import MissingTokenError, InvalidTokenError
from jose import JWTError
import logging

logger = logging.getLogger(__name__)


# Tokens travel in a custom header rather than Authorization: Bearer
auth_token_header = APIKeyHeader(name="auth-token", auto_error=False)


def get_image_service() -> ImageService:
    """Get image service instance backed by the configured upload directory."""
    return ImageService()


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    image_service: ImageService = Depends(get_image_service)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        image_service: Storage used to remove files of deleted accounts

    Returns:
        AuthService instance
    """
    return AuthService(db, image_service)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    image_service: ImageService = Depends(get_image_service)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session
        image_service: Storage for listing images

    Returns:
        PropertyService instance
    """
    return PropertyService(db, image_service)


async def get_message_service(db: AsyncSession = Depends(get_db)) -> MessageService:
    """Get message service instance."""
    return MessageService(db)


async def get_favorite_service(db: AsyncSession = Depends(get_db)) -> FavoriteService:
    """Get favorite service instance."""
    return FavoriteService(db)


async def get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    """Get review service instance."""
    return ReviewService(db)


async def get_current_user_id(token: Optional[str] = Depends(auth_token_header)) -> uuid.UUID:
    """
    Resolve the auth-token header to a user ID.

    Args:
        token: Value of the auth-token header

    Returns:
        ID of the signed-in user

    Raises:
        MissingTokenError: If no token was sent
        InvalidTokenError: If the token is malformed, tampered with or expired
    """
    if not token:
        raise MissingTokenError()

    try:
        payload = verify_token(token)
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise InvalidTokenError()

    return payload.user_id


async def get_current_user(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the auth-token header.

    Args:
        user_id: ID carried by the token
        db: Database session

    Returns:
        Current User object

    Raises:
        InvalidTokenError: If the account behind the token no longer exists
    """
    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        logger.warning(f"Token for unknown user {user_id}")
        raise InvalidTokenError()
    return user
