"""
User repository for account lookups, signup and credential checks.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.repositories.base import BaseRepository
from app.models.user import User
from typing import Optional, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user, hashing the plain text password.

        Args:
            user_data: name, email, phone_no, password and role

        Returns:
            Created user instance
        """
        data = dict(user_data)
        password = data.pop("password")
        user = User(**data)
        user.set_password(password)

        created_user = await self.save(user)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        normalized_email = email.lower().strip()
        result = await self.db.execute(select(User).where(User.email == normalized_email))
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone_no: str) -> Optional[User]:
        """Get user by phone number."""
        result = await self.db.execute(select(User).where(User.phone_no == phone_no))
        return result.scalar_one_or_none()

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            User instance if authentication successful, None otherwise
        """
        user = await self.get_by_email(email)
        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def is_email_taken(self, email: str, exclude_user_id: Optional[uuid.UUID] = None) -> bool:
        """
        Check whether an email belongs to an account other than the excluded one.

        Args:
            email: Email to check
            exclude_user_id: Account allowed to hold the email already

        Returns:
            True if another account uses the email
        """
        user = await self.get_by_email(email)
        return user is not None and user.id != exclude_user_id

    async def is_phone_taken(self, phone_no: str, exclude_user_id: Optional[uuid.UUID] = None) -> bool:
        """Check whether a phone number belongs to an account other than the excluded one."""
        user = await self.get_by_phone(phone_no)
        return user is not None and user.id != exclude_user_id

    async def update_password(self, user: User, new_password: str) -> User:
        """
        Store a new password for the user.

        Args:
            user: Account to update
            new_password: New plain text password

        Returns:
            Updated user instance
        """
        user.set_password(new_password)
        updated_user = await self.save(user)
        logger.info(f"Password updated for user: {user.id}")
        return updated_user
