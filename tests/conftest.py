"""
Test configuration and fixtures for the RishStay API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="rishstay-uploads-"))

import io
import uuid
from typing import AsyncGenerator, Dict, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.models.user import User, UserRole
from app.models.property import Property
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.message import MessageRepository
from app.repositories.favorite import FavoriteRepository
from app.repositories.review import ReviewRepository
from app.schemas.property import PropertyCreate
from app.services.auth import AuthService
from app.services.property import PropertyService
from app.services.message import MessageService
from app.services.favorite import FavoriteService
from app.services.review import ReviewService
from app.services.image import ImageService
from app.utils.auth import create_access_token
from app.utils.dependencies import get_image_service
from app.utils.file_utils import FileStorage


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database with all tables for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    """Image storage rooted in a per-test directory."""
    return FileStorage(root=str(tmp_path / "uploads"), url_path="/uploads")


@pytest.fixture
def image_service(storage: FileStorage) -> ImageService:
    return ImageService(storage)


@pytest.fixture
async def async_client(session_factory, image_service) -> AsyncGenerator[AsyncClient, None]:
    """Async client driving the app in-process, one database session per request."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_service] = lambda: image_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def message_repository(db_session: AsyncSession) -> MessageRepository:
    return MessageRepository(db_session)


@pytest.fixture
def favorite_repository(db_session: AsyncSession) -> FavoriteRepository:
    return FavoriteRepository(db_session)


@pytest.fixture
def review_repository(db_session: AsyncSession) -> ReviewRepository:
    return ReviewRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession, image_service: ImageService) -> AuthService:
    return AuthService(db_session, image_service)


@pytest.fixture
def property_service(db_session: AsyncSession, image_service: ImageService) -> PropertyService:
    return PropertyService(db_session, image_service)


@pytest.fixture
def message_service(db_session: AsyncSession) -> MessageService:
    return MessageService(db_session)


@pytest.fixture
def favorite_service(db_session: AsyncSession) -> FavoriteService:
    return FavoriteService(db_session)


@pytest.fixture
def review_service(db_session: AsyncSession) -> ReviewService:
    return ReviewService(db_session)


# Test data factories
def _unique_phone() -> str:
    return str(uuid.uuid4().int)[:10]


class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        name: str = "Test User",
        email: Optional[str] = None,
        phone_no: Optional[str] = None,
        password: str = "secret123",
        role: UserRole = UserRole.TENANT
    ) -> dict:
        """Create user data dictionary."""
        return {
            "name": name,
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "phone_no": phone_no or _unique_phone(),
            "password": password,
            "role": role
        }

    @staticmethod
    def signup_payload(**overrides) -> dict:
        """Signup body as the API expects it."""
        data = UserFactory.create_user_data(**overrides)
        return {
            "name": data["name"],
            "email": data["email"],
            "phoneNo": data["phone_no"],
            "password": data["password"],
            "role": data["role"].value
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **overrides) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**overrides))

    @staticmethod
    async def create_landlord(user_repo: UserRepository, **overrides) -> User:
        overrides.setdefault("name", "Test Landlord")
        return await UserFactory.create_user(user_repo, role=UserRole.LANDLORD, **overrides)

    @staticmethod
    async def create_tenant(user_repo: UserRepository, **overrides) -> User:
        overrides.setdefault("name", "Test Tenant")
        return await UserFactory.create_user(user_repo, role=UserRole.TENANT, **overrides)


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(**overrides) -> dict:
        """Listing body in the API's camelCase shape."""
        data = {
            "title": "Sunny 2BHK near the metro",
            "description": "Bright apartment with balcony and covered parking.",
            "price": 15000,
            "location": {
                "address": "12 MG Road",
                "city": "Bengaluru",
                "state": "Karnataka",
                "zipCode": "560001"
            },
            "propertyType": "apartment",
            "bedrooms": 2,
            "bathrooms": 1,
            "area": 850,
            "maxGuests": 4,
            "guestType": "Family",
            "amenities": ["WiFi", "Parking"],
            "rules": ["No smoking"],
            "rooms": [
                {"roomName": "Master", "rent": 8000, "size": 150, "amenities": ["AC"]},
                {"roomName": "Second", "rent": 7000, "size": 120}
            ]
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_property(property_service: PropertyService, landlord: User, **overrides) -> Property:
        """Create a test property owned by the landlord."""
        data = PropertyCreate.model_validate(PropertyFactory.create_property_data(**overrides))
        return await property_service.create_property(data, landlord)


# Common helpers
def auth_headers(user: User) -> Dict[str, str]:
    """Headers carrying a valid token for the user."""
    return {"auth-token": create_access_token(user.id)}


def make_image_bytes(image_format: str = "PNG", size=(32, 32), color=(200, 80, 40)) -> bytes:
    """Encode a small solid-color image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def image_upload(name: str = "photo.png", image_format: str = "PNG", content_type: str = "image/png"):
    """Multipart tuple for one image file."""
    return ("images", (name, make_image_bytes(image_format), content_type))


@pytest.fixture
async def landlord(user_repository: UserRepository) -> User:
    return await UserFactory.create_landlord(user_repository)


@pytest.fixture
async def other_landlord(user_repository: UserRepository) -> User:
    return await UserFactory.create_landlord(user_repository, name="Other Landlord")


@pytest.fixture
async def tenant(user_repository: UserRepository) -> User:
    return await UserFactory.create_tenant(user_repository)


@pytest.fixture
async def sample_property(property_service: PropertyService, landlord: User) -> Property:
    return await PropertyFactory.create_property(property_service, landlord)
