"""
API route handlers for the RishStay API.
Each router is mounted under the API prefix.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .messages import router as messages_router
from .favorites import router as favorites_router
from .reviews import router as reviews_router

__all__ = [
    "auth_router",
    "properties_router",
    "messages_router",
    "favorites_router",
    "reviews_router",
]
