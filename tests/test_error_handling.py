"""
Tests for error handling and validation.
Tests custom exceptions, the request middleware, and error response formatting.
"""

import json
import pytest
from fastapi.exceptions import RequestValidationError
from httpx import AsyncClient
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator
from sqlalchemy.exc import IntegrityError, OperationalError

from app.main import app
from app.services.error_handler import ErrorHandlerService
from app.utils.dependencies import get_review_service
from app.utils.exceptions import (
    ValidationError,
    NotFoundError,
    ForbiddenError,
    ConflictError,
    PropertyNotFoundError,
    DuplicateResourceError,
    DuplicateReviewError,
    TooManyFilesError
)


class _Sample(BaseModel):
    name: str = Field(..., min_length=3)
    age: int

    @field_validator("name")
    @classmethod
    def no_digits(cls, v):
        if any(ch.isdigit() for ch in v):
            raise ValueError("Name cannot contain digits")
        return v


def _body(response) -> dict:
    return json.loads(response.body)


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["success"] is False
        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")

    def test_format_error_response_omits_empty_details(self):
        response = ErrorHandlerService.format_error_response("X", "msg")
        assert "details" not in response["error"]

    def test_handle_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(NotFoundError("Property", "abc"))

        assert response.status_code == 404
        body = _body(response)
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
        assert body["error"]["message"] == "Property not found with ID: abc"

    def test_handle_api_exception_with_field_errors(self):
        exception = ValidationError.for_field("preferredDate", "Preferred date must be in the future")

        response = ErrorHandlerService.handle_api_exception(exception)

        assert response.status_code == 400
        assert _body(response)["error"]["details"] == [
            {"field": "preferredDate", "message": "Preferred date must be in the future"}
        ]

    def test_handle_pydantic_validation_error(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            _Sample(name="a1", age="old")

        response = ErrorHandlerService.handle_validation_error(exc_info.value)

        assert response.status_code == 400
        details = _body(response)["error"]["details"]
        assert {detail["field"] for detail in details} == {"name", "age"}

    def test_validator_message_prefix_is_stripped(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            _Sample(name="abc1", age=3)

        response = ErrorHandlerService.handle_validation_error(exc_info.value)

        assert _body(response)["error"]["details"][0]["message"] == "Name cannot contain digits"

    def test_request_location_prefix_is_stripped(self):
        exception = RequestValidationError([
            {"loc": ("body", "location", "zipCode"), "msg": "Field required", "type": "missing"},
            {"loc": ("query", "limit"), "msg": "Input should be less than or equal to 100", "type": "less_than_equal"},
            {"loc": ("body",), "msg": "Field required", "type": "missing"},
        ])

        response = ErrorHandlerService.handle_validation_error(exception)

        fields = [detail["field"] for detail in _body(response)["error"]["details"]]
        assert fields == ["location.zipCode", "limit", "body"]

    def test_handle_integrity_error(self):
        error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))

        response = ErrorHandlerService.handle_database_error(error)

        assert response.status_code == 409
        body = _body(response)
        assert body["error"]["code"] == "INTEGRITY_ERROR"
        assert "users.email" not in body["error"]["message"]

    def test_handle_other_database_error(self):
        error = OperationalError("SELECT", {}, Exception("database is locked"))

        response = ErrorHandlerService.handle_database_error(error)

        assert response.status_code == 500
        assert _body(response)["error"]["code"] == "DATABASE_ERROR"

    def test_handle_unexpected_error_hides_details(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret internals"))

        assert response.status_code == 500
        body = _body(response)
        assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "secret" not in body["error"]["message"]


class TestCustomExceptions:
    """Test exception status codes and messages."""

    @pytest.mark.parametrize("exception,status_code", [
        (ValidationError("bad"), 400),
        (PropertyNotFoundError("x"), 404),
        (ForbiddenError(), 403),
        (ConflictError("dup"), 409),
        (DuplicateResourceError("User", "email"), 409),
        (DuplicateReviewError(), 400),
        (TooManyFilesError(11, 10), 400),
    ])
    def test_status_codes(self, exception, status_code):
        assert exception.status_code == status_code

    def test_duplicate_resource_message(self):
        assert DuplicateResourceError("User", "email").detail == "User with this email already exists"


class TestErrorResponsesOverHTTP:
    """Test the error envelope as clients see it."""

    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json()["success"] is False

    async def test_malformed_json(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login", content=b"{not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_unsupported_content_type(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login", content=b"email=x", headers={"content-type": "text/plain"}
        )

        assert response.status_code == 400
        assert "Unsupported content type" in response.json()["error"]["message"]

    async def test_request_id_header_matches_error(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/getuser")

        assert response.headers["X-Request-ID"] == response.json()["error"]["request_id"]

    async def test_unexpected_exception_becomes_500(self, async_client: AsyncClient):
        def broken_service():
            raise RuntimeError("boom")

        app.dependency_overrides[get_review_service] = broken_service

        response = await async_client.get("/api/reviews")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["message"] == "An unexpected error occurred. Please try again later."
        assert "boom" not in response.text
