"""
Configuration management using Pydantic settings.
Handles the database URL, token secrets, upload storage and pagination defaults.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "rishstay-development-secret-change-me"


class Settings(BaseSettings):
    """Application settings read from the environment and an optional .env file."""

    # Application configuration
    app_name: str = "RishStay API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database configuration - required, there is no usable default
    database_url: str

    # Token configuration
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    bcrypt_rounds: int = 12

    # File upload configuration
    upload_dir: str = "./uploads"
    uploads_url_path: str = "/uploads"
    max_file_size: int = 5 * 1024 * 1024  # 5MB
    max_images_per_property: int = 10
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]

    # API configuration
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000"]

    # Pagination defaults
    default_page_size: int = 20
    max_page_size: int = 100
    reviews_limit: int = 6

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 5000

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Make sure an async driver is used for the configured database."""
        if not v or not v.strip():
            raise ValueError("DATABASE_URL is required")
        v = v.strip()
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v):
        """Reject empty secrets."""
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("upload_dir")
    @classmethod
    def create_upload_directory(cls, v):
        """Ensure the upload directory exists."""
        if v and not os.path.exists(v):
            os.makedirs(v, exist_ok=True)
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @property
    def max_request_size(self) -> int:
        """Largest accepted request body: a full image batch plus form overhead."""
        return self.max_file_size * self.max_images_per_property + 1024 * 1024

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Fails loudly when DATABASE_URL is not configured.
    """
    loaded = Settings()
    if loaded.jwt_secret_key == DEFAULT_JWT_SECRET and not (loaded.is_development or loaded.is_testing):
        logger.warning("JWT_SECRET_KEY is not set; using the development secret")
    return loaded


# Global settings instance
settings = get_settings()
