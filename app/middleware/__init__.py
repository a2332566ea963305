"""
Middleware package for the RishStay API.
"""

from .validation import ValidationMiddleware

__all__ = ["ValidationMiddleware"]
