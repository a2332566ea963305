"""
FastAPI application entry point.
Wires settings, middleware, routers, static uploads and error handlers together.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from app.config import settings
from app.database import check_database_connection, create_tables, close_db_connection
from app.routers import auth_router, properties_router, messages_router, favorites_router, reviews_router
from app.utils.exceptions import APIException
from app.services.error_handler import ErrorHandlerService
from app.middleware.validation import ValidationMiddleware

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

API_DESCRIPTION = """
REST API for the RishStay rental marketplace.

Landlords publish listings with rooms, images and availability; tenants search
them, save favorites and send inquiries. Log in with `/api/auth/login` or sign up
with `/api/auth/createUser`, then pass the returned token in the `auth-token` header.
"""

OPENAPI_TAGS = [
    {"name": "Authentication", "description": "Signup, login and account management"},
    {"name": "Properties", "description": "Listing management, search and images"},
    {"name": "Messages", "description": "Property inquiries and replies"},
    {"name": "Favorites", "description": "Saved properties"},
    {"name": "Reviews", "description": "Platform reviews"},
    {"name": "Health", "description": "Service status"},
]

# Most specific first; Exception catches whatever the middleware did not
EXCEPTION_HANDLERS = (
    (APIException, ErrorHandlerService.handle_api_exception),
    (RequestValidationError, ErrorHandlerService.handle_validation_error),
    (PydanticValidationError, ErrorHandlerService.handle_validation_error),
    (SQLAlchemyError, ErrorHandlerService.handle_database_error),
    (StarletteHTTPException, ErrorHandlerService.handle_http_exception),
    (Exception, ErrorHandlerService.handle_unexpected_error),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup and release the connection pool on shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")
    await create_tables()

    yield

    logger.info("Shutting down application")
    await close_db_connection()


def _as_handler(handle):
    async def handler(request: Request, exc: Exception):
        return handle(exc, request)
    return handler


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=API_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_request_size,
    api_prefix=settings.api_prefix,
    enable_request_logging=not settings.is_testing
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

for router in (auth_router, properties_router, messages_router, favorites_router, reviews_router):
    app.include_router(router, prefix=settings.api_prefix)

app.mount(settings.uploads_url_path, StaticFiles(directory=settings.upload_dir), name="uploads")

for exception_type, handle in EXCEPTION_HANDLERS:
    app.add_exception_handler(exception_type, _as_handler(handle))


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "success": True,
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "api_prefix": settings.api_prefix,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Report service status; 503 when the database cannot be reached."""
    if not await check_database_connection():
        logger.error("Health check failed: database unreachable")
        return JSONResponse(
            status_code=503,
            content=ErrorHandlerService.format_error_response(
                error_code="SERVICE_UNAVAILABLE",
                message="Database connection failed"
            )
        )

    return {
        "success": True,
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
