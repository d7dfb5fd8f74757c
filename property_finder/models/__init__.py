"""
Database models for the Property Finder API.
Includes users, listings, lookups, images and engagement records.
"""

from property_finder.models.user import User, UserType
from property_finder.models.lookup import PropertyType, Location, Feature, property_features
from property_finder.models.property import Property, ListingType, PropertyStatus
from property_finder.models.image import PropertyImage
from property_finder.models.engagement import Inquiry, Review

# Export all models for easy importing
__all__ = [
    "User",
    "UserType",
    "PropertyType",
    "Location",
    "Feature",
    "property_features",
    "Property",
    "ListingType",
    "PropertyStatus",
    "PropertyImage",
    "Inquiry",
    "Review",
]
