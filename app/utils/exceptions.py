"""
Exception types raised by services and dependencies.
Each class fixes its HTTP status and error code; the handlers in main turn them
into the failure envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


MISSING_TOKEN_MESSAGE = "Authentication token missing. Please log in."
INVALID_TOKEN_MESSAGE = "Invalid or expired token. Please log in again."


class APIException(HTTPException):
    """Base class; subclasses override the class attributes."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "API_ERROR"
    default_detail: str = "Request failed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=headers
        )


# Generic failures by status

class BadRequestError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"
    default_detail = "Bad request"


class ValidationError(BadRequestError):
    """Input rejected by a business rule, reported per field."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Build a validation error for a single field."""
        return cls(message, field_errors=[{"field": field, "message": message}])


class UnauthorizedError(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_detail = "Authentication required"


class ForbiddenError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "Access forbidden"


class NotFoundError(APIException):
    """A referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"
        super().__init__(detail)


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "Resource already exists"


class InternalServerError(APIException):
    error_code = "INTERNAL_SERVER_ERROR"
    default_detail = "Internal server error"


# Authentication

class MissingTokenError(UnauthorizedError):
    """No auth-token header on a protected route."""

    error_code = "TOKEN_MISSING"
    default_detail = MISSING_TOKEN_MESSAGE


class InvalidTokenError(UnauthorizedError):
    """Token could not be decoded, has expired, or points to no user."""

    error_code = "TOKEN_INVALID"
    default_detail = INVALID_TOKEN_MESSAGE


class InvalidCredentialsError(UnauthorizedError):
    error_code = "INVALID_CREDENTIALS"
    default_detail = "Invalid credentials"


# Resources

class PropertyNotFoundError(NotFoundError):
    def __init__(self, property_id: str):
        super().__init__("Property", property_id)


class OwnershipError(ForbiddenError):
    """Caller does not own the listing being modified."""

    default_detail = "Not authorized to modify this property"


class DuplicateResourceError(ConflictError):
    def __init__(self, resource: str, field: str):
        super().__init__(f"{resource} with this {field} already exists")


class DuplicateReviewError(BadRequestError):
    """A user may only review the platform once."""

    error_code = "DUPLICATE_REVIEW"
    default_detail = "You have already reviewed the platform"


# Uploads

class FileUploadError(BadRequestError):
    error_code = "FILE_UPLOAD_ERROR"

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(FileUploadError):
    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(FileUploadError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")


class TooManyFilesError(FileUploadError):
    """Image count limit exceeded."""

    def __init__(self, count: int, limit: int):
        super().__init__(f"{count} images exceed the limit of {limit} per property")
