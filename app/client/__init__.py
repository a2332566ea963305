"""
Typed async client for the RishStay API.
"""

from .session import Session
from .api import RishStayClient, ApiError

__all__ = ["Session", "RishStayClient", "ApiError"]
