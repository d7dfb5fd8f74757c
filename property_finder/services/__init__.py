"""
Business logic services.
"""

from property_finder.services.auth import AuthService
from property_finder.services.property import PropertyService
from property_finder.services.search import PropertySearchService
from property_finder.services.image import ImageService
from property_finder.services.lookup import LookupService
from property_finder.services.error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "PropertySearchService",
    "ImageService",
    "LookupService",
    "ErrorHandlerService",
]
