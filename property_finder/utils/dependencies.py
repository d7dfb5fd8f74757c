"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from property_finder.database import get_db
from property_finder.models.user import User
from property_finder.repositories.property import PropertyRepository
from property_finder.services.auth import AuthService
from property_finder.services.image import ImageService
from property_finder.services.lookup import LookupService
from property_finder.services.property import PropertyService
from property_finder.services.search import PropertySearchService
from property_finder.utils.exceptions import UnauthorizedError, InactiveUserError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_search_service(db: AsyncSession = Depends(get_db)) -> PropertySearchService:
    """Search service reading through the SQL-backed property store."""
    return PropertySearchService(PropertyRepository(db))


async def get_image_service(db: AsyncSession = Depends(get_db)) -> ImageService:
    return ImageService(db)


async def get_lookup_service(db: AsyncSession = Depends(get_db)) -> LookupService:
    return LookupService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer credentials
        auth_service: Authentication service

    Returns:
        Current User object

    Raises:
        UnauthorizedError: If no token provided
        InvalidTokenError: If token is invalid
        TokenExpiredError: If token is expired
        InactiveUserError: If user account is inactive
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get current active user (additional check for user status).

    Raises:
        InactiveUserError: If user account is inactive
    """
    if not current_user.is_active:
        raise InactiveUserError()

    return current_user
