"""
Pydantic schemas for request and response validation.
"""

from property_finder.schemas.page import PageResult
from property_finder.schemas.property import (
    PropertyFilter,
    PropertySummary,
    PropertyDetail,
    PropertyCreate,
    PropertyUpdate,
    PropertyImageResponse,
    FeatureResponse,
    LookupResponse,
    LocationResponse,
    OwnerProfile,
)
from property_finder.schemas.user import UserCreate, UserResponse
from property_finder.schemas.auth import (
    LoginRequest,
    LoginResponse,
    TokenResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
)

__all__ = [
    "PageResult",
    "PropertyFilter",
    "PropertySummary",
    "PropertyDetail",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyImageResponse",
    "FeatureResponse",
    "LookupResponse",
    "LocationResponse",
    "OwnerProfile",
    "UserCreate",
    "UserResponse",
    "LoginRequest",
    "LoginResponse",
    "TokenResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",
]
