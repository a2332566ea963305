"""
Helpers shared across layers: tokens and passwords, exceptions, validators and file storage.
"""

from .auth import (
    create_access_token,
    verify_token,
    hash_password,
    verify_password,
    TokenPayload
)

from .exceptions import (
    APIException,
    BadRequestError,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    MissingTokenError,
    InvalidTokenError,
    InvalidCredentialsError,
    PropertyNotFoundError,
    OwnershipError,
    DuplicateResourceError,
    DuplicateReviewError,
    FileUploadError
)

from .validators import ensure_utc, clean_required_text, clean_string_list, normalize_phone
from .file_utils import FileStorage

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "create_access_token",
    "verify_token",
    "hash_password",
    "verify_password",
    "TokenPayload",
    "APIException",
    "BadRequestError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "MissingTokenError",
    "InvalidTokenError",
    "InvalidCredentialsError",
    "PropertyNotFoundError",
    "OwnershipError",
    "DuplicateResourceError",
    "DuplicateReviewError",
    "FileUploadError",
    "ensure_utc",
    "clean_required_text",
    "clean_string_list",
    "normalize_phone",
    "FileStorage",
]
