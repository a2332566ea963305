"""
Authentication service for signup, login and account management.
Issues access tokens and enforces unique email and phone numbers.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.favorite import FavoriteRepository
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, PasswordChangeRequest, UserResponse
from app.services.image import ImageService
from app.utils.auth import create_access_token
from app.utils.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    ConflictError,
    DuplicateResourceError,
    UnauthorizedError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing accounts and credentials.
    Every account operation acts on the calling user only.
    """

    def __init__(self, db_session: AsyncSession, image_service: Optional[ImageService] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)
        self.image_service = image_service or ImageService()

    async def register(self, user_data: UserCreate) -> Tuple[User, str]:
        """
        Create an account and sign it in.

        Args:
            user_data: Signup data

        Returns:
            Tuple of (user, access token)

        Raises:
            DuplicateResourceError: If the email or phone number is already registered
        """
        await self._ensure_unique_contact(user_data.email, user_data.phone_no)

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except IntegrityError:
            # A concurrent signup won the unique constraint
            logger.warning(f"Signup conflict for {user_data.email}")
            raise ConflictError("User with this email or phone number already exists")

        logger.info(f"User registered: {user.email} ({user.role.value})")
        return user, create_access_token(user.id)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user, access token)

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        user = await self.user_repo.authenticate_user(email, password)
        if not user:
            logger.warning(f"Failed login attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User logged in: {user.email}")
        return user, create_access_token(user.id)

    async def get_user_by_id(self, user_id: uuid.UUID) -> User:
        """
        Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def build_user_response(self, user: User) -> UserResponse:
        """User view including the saved property IDs."""
        favorites = await self.favorite_repo.get_property_ids(user.id)
        return UserResponse(**user.to_dict(), favorites=favorites)

    async def update_profile(self, user: User, update_data: UserUpdate) -> User:
        """
        Change the caller's name, email or phone number.

        Args:
            user: Account being edited
            update_data: Fields to change

        Returns:
            Updated user

        Raises:
            DuplicateResourceError: If the new email or phone belongs to another account
        """
        changes = update_data.model_dump(exclude_unset=True)
        if not changes:
            return user

        await self._ensure_unique_contact(changes.get("email"), changes.get("phone_no"), exclude_user_id=user.id)

        try:
            updated = await self.user_repo.update(user, changes)
        except IntegrityError:
            logger.warning(f"Profile update conflict for user {user.id}")
            raise ConflictError("User with this email or phone number already exists")

        logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")
        return updated

    async def change_password(self, user: User, request: PasswordChangeRequest) -> None:
        """
        Replace the caller's password after checking the current one.

        Raises:
            UnauthorizedError: If the old password does not match
        """
        if not user.verify_password(request.old_password):
            logger.warning(f"Password change rejected for user {user.id}: wrong old password")
            raise UnauthorizedError("Old password is incorrect")

        await self.user_repo.update_password(user, request.new_password)

    async def delete_account(self, user: User) -> None:
        """
        Delete the caller's account with everything it owns.
        Properties, messages, favorites and the review go with it, as do stored image files.
        """
        properties = await self.property_repo.get_properties_by_landlord(user.id)
        owned = [(prop.id, list(prop.images or [])) for prop in properties]

        await self.user_repo.delete(user)

        for property_id, images in owned:
            self.image_service.remove_property_images(property_id, images)

        logger.info(f"Deleted account {user.id} with {len(owned)} properties")

    async def _ensure_unique_contact(
        self,
        email: Optional[str] = None,
        phone_no: Optional[str] = None,
        exclude_user_id: Optional[uuid.UUID] = None
    ) -> None:
        if email and await self.user_repo.is_email_taken(email, exclude_user_id):
            raise DuplicateResourceError("User", "email")
        if phone_no and await self.user_repo.is_phone_taken(phone_no, exclude_user_id):
            raise DuplicateResourceError("User", "phone number")
