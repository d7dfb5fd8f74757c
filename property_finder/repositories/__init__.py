"""
Repository layer for data access operations.
"""

from property_finder.repositories.base import BaseRepository
from property_finder.repositories.property import PropertyRepository
from property_finder.repositories.user import UserRepository
from property_finder.repositories.image import ImageRepository
from property_finder.repositories.lookup import (
    PropertyTypeRepository,
    LocationRepository,
    FeatureRepository,
)

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "UserRepository",
    "ImageRepository",
    "PropertyTypeRepository",
    "LocationRepository",
    "FeatureRepository",
]
