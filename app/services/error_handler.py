"""
Error handling service that turns exceptions into the API's failure envelope.
Every failure leaves the API as {"success": false, "error": {...}}.
"""

from typing import Dict, Any, Optional, List, Sequence, Union
from datetime import datetime, timezone
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from app.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

# Location prefixes FastAPI puts in front of the field name
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."

# Substrings of driver messages mapped to client-safe descriptions
_CONSTRAINT_HINTS = (
    ("unique", "Duplicate value for unique field"),
    ("foreign key", "Referenced record does not exist"),
    ("not null", "Required field cannot be empty"),
    ("check constraint", "Value does not meet validation requirements"),
)


class ErrorHandlerService:
    """
    Builds failure responses for every kind of exception the API can raise.
    Each handler logs once and reuses the request id assigned by the middleware.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the failure envelope.

        Args:
            error_code: Machine readable code such as NOT_FOUND
            message: Human-readable error message
            details: Per-field problems, left out when empty
            request_id: Request identifier for tracing

        Returns:
            {"success": False, "error": {...}}
        """
        error: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": ErrorHandlerService._get_current_timestamp(),
        }
        if details:
            error["details"] = details
        if request_id:
            error["request_id"] = request_id

        return {"success": False, "error": error}

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Respond to an exception raised on purpose by a service or dependency.

        Args:
            exception: API exception instance
            request: Optional FastAPI request object

        Returns:
            JSON response carrying the exception's status and code
        """
        details = exception.field_errors if isinstance(exception, ValidationError) else None
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=details,
            headers=exception.headers,
            log_level=logging.WARNING
        )

    @staticmethod
    def handle_validation_error(
        exception: Union[RequestValidationError, PydanticValidationError],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Respond to malformed input with one entry per invalid field.

        Args:
            exception: RequestValidationError or pydantic ValidationError
            request: Optional FastAPI request object

        Returns:
            400 JSON response listing each invalid field
        """
        details = [
            {
                "field": ErrorHandlerService._field_path(error.get("loc", ())),
                "message": ErrorHandlerService._clean_message(error.get("msg", "Invalid value")),
                "type": error.get("type", "value_error"),
            }
            for error in exception.errors()
        ]
        return ErrorHandlerService._respond(
            request,
            status_code=400,
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=details,
            log_level=logging.WARNING
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Respond to a database failure without exposing driver messages.

        Integrity violations become 409; anything else is a 500.
        """
        if isinstance(exception, IntegrityError):
            constraint_info = ErrorHandlerService._extract_constraint_info(exception)
            status_code = 409
            error_code = "INTEGRITY_ERROR"
            message = f"Constraint violation: {constraint_info}" if constraint_info else "Data integrity constraint violation"
        else:
            status_code = 500
            error_code = "DATABASE_ERROR"
            message = "Database operation failed"

        return ErrorHandlerService._respond(
            request,
            status_code=status_code,
            error_code=error_code,
            message=message,
            log_level=logging.ERROR,
            exc_info=exception
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Respond to routing errors such as unknown paths or wrong methods."""
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            headers=getattr(exception, "headers", None),
            log_level=logging.WARNING
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Respond to a bug with a generic 500; the traceback only goes to the log.

        Args:
            exception: Unexpected exception
            request: Optional FastAPI request object

        Returns:
            500 JSON response without internal details
        """
        return ErrorHandlerService._respond(
            request,
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message=GENERIC_ERROR_MESSAGE,
            log_level=logging.ERROR,
            log_message=f"{type(exception).__name__} - {exception}",
            exc_info=exception
        )

    @staticmethod
    def _respond(
        request: Optional[Request],
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        log_level: int = logging.WARNING,
        log_message: Optional[str] = None,
        exc_info: Optional[BaseException] = None
    ) -> JSONResponse:
        request_id = ErrorHandlerService._get_request_id(request)
        path = request.url.path if request else None

        logger.log(
            log_level,
            f"{error_code} [{request_id}] {path or '-'}: {log_message or message}",
            extra={
                "request_id": request_id,
                "error_code": error_code,
                "status_code": status_code,
                "path": path,
                "details": details,
            },
            exc_info=exc_info
        )

        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(error_code, message, details, request_id),
            headers=headers
        )

    @staticmethod
    def _field_path(loc: Sequence[Any]) -> str:
        """Dotted field path without the request location prefix."""
        parts = [str(part) for part in loc]
        if parts and parts[0] in _LOCATION_PREFIXES:
            parts = parts[1:]
        return ".".join(parts) or "body"

    @staticmethod
    def _clean_message(message: str) -> str:
        """Drop pydantic's "Value error, " prefix from custom validator messages."""
        prefix = "Value error, "
        return message[len(prefix):] if message.startswith(prefix) else message

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the id assigned by the request middleware, or make a new one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        """Describe which kind of constraint failed, if the driver message says."""
        error_msg = str(exception.orig).lower()
        for needle, description in _CONSTRAINT_HINTS:
            if needle in error_msg:
                return description
        return None
