"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["value is not a valid email address"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )


class ErrorBody(BaseModel):
    """Schema for the error object."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message", examples=["Request validation failed"])
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2025-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Per-field validation failures")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    success: bool = False
    error: ErrorBody


_ERROR_EXAMPLES = {
    400: ("Bad Request - Invalid input", "VALIDATION_ERROR", "Request validation failed"),
    401: ("Unauthorized - Missing or invalid token", "TOKEN_MISSING", "Authentication token missing. Please log in."),
    403: ("Forbidden - Caller does not own the resource", "FORBIDDEN", "Not authorized to modify this property"),
    404: ("Not Found", "NOT_FOUND", "Property not found"),
    409: ("Conflict - Duplicate value", "CONFLICT", "User with this email already exists"),
    500: ("Internal Server Error", "INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later."),
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Build OpenAPI response documentation for the given status codes.

    Args:
        status_codes: HTTP status codes the route can return

    Returns:
        Mapping usable as the ``responses`` argument of a route decorator
    """
    responses: Dict[int, Dict[str, Any]] = {}
    for code in status_codes:
        description, error_code, message = _ERROR_EXAMPLES[code]
        responses[code] = {
            "description": description,
            "model": APIErrorResponse,
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": {
                            "code": error_code,
                            "message": message,
                            "timestamp": "2025-01-01T00:00:00Z",
                            "request_id": "abc12345"
                        }
                    }
                }
            }
        }
    return responses


def get_public_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for unauthenticated reads."""
    return get_error_responses(400, 404, 500)


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for authenticated routes without ownership checks."""
    return get_error_responses(400, 401, 404, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for owner-only mutations."""
    return get_error_responses(400, 401, 403, 404, 500)
