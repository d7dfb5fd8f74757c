"""
Utility modules for the Property Finder API.
"""

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    ServiceUnavailableError,
    InvalidFilterError,
    StorageUnavailableError,
)

# Auth helpers and dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "ServiceUnavailableError",
    "InvalidFilterError",
    "StorageUnavailableError",
]
