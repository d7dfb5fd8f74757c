"""
API route handlers for the Property Finder API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .lookups import router as lookups_router

__all__ = ["auth_router", "properties_router", "lookups_router"]
