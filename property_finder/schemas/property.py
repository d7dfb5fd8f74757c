"""
Pydantic schemas for property requests and responses.
Handles search filters, listing views and property create/update payloads.
"""

from pydantic import ConfigDict, Field, field_validator
from property_finder.schemas.base import CamelModel, CamelORMModel
from typing import Optional, List, Tuple
from datetime import datetime
from decimal import Decimal
from property_finder.models.property import ListingType, PropertyStatus
from property_finder.models.user import UserType


class PropertyFilter(CamelModel):
    """
    Immutable search criteria for listing properties.

    Unset criteria do not restrict the result. ``features`` lists feature ids
    that must all be present on a property; repeated ids count once.
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(1, description="1-based page number")
    page_size: int = Field(10, description="Number of properties per page")
    min_price: Optional[Decimal] = Field(None, description="Inclusive lower price bound")
    max_price: Optional[Decimal] = Field(None, description="Inclusive upper price bound")
    location_id: Optional[int] = Field(None, description="Location the property must be in")
    property_type_id: Optional[int] = Field(None, description="Required property type")
    bedrooms: Optional[int] = Field(None, description="Minimum number of bedrooms")
    bathrooms: Optional[int] = Field(None, description="Minimum number of bathrooms")
    listing_type: Optional[str] = Field(None, description="Exact listing type, e.g. for-sale")
    features: Tuple[int, ...] = Field(default_factory=tuple, description="Required feature ids")


class LookupResponse(CamelORMModel):
    """Property type or location entry."""

    id: int
    name: str


class LocationResponse(LookupResponse):
    city: Optional[str] = None
    country: Optional[str] = None


class FeatureResponse(CamelORMModel):
    """Amenity that can be attached to a property."""

    id: int
    name: str
    category: Optional[str] = None
    icon_name: Optional[str] = None


class PropertyImageResponse(CamelORMModel):
    """Image attached to a property."""

    id: int
    image_url: str = Field(..., description="Public URL of the image")
    caption: Optional[str] = None
    is_primary: bool = False
    created_at: Optional[datetime] = None


class OwnerProfile(CamelModel):
    """Public profile of a listing's owner."""

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    user_type: UserType


class PropertySummary(CamelModel):
    """Listing view returned by the search endpoint."""

    id: int
    title: str
    description: str
    property_type: str = Field(..., description="Property type name")
    location: str = Field(..., description="Location name")
    address: str
    price: Decimal
    size: Optional[Decimal] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    listing_type: str
    status: str
    owner_name: str = Field(..., description="Display name of the owner")
    primary_image_url: Optional[str] = Field(
        None,
        description="First image flagged primary, else the first image"
    )
    created_at: datetime


class PropertyDetail(PropertySummary):
    """Full view of a single property."""

    property_type_id: int
    location_id: int
    year_built: Optional[int] = None
    owner: OwnerProfile
    images: List[PropertyImageResponse] = Field(default_factory=list)
    features: List[FeatureResponse] = Field(default_factory=list)
    updated_at: Optional[datetime] = None


class PropertyCreate(CamelModel):
    """Schema for creating a new property."""

    title: str = Field(
        ...,
        min_length=3,
        max_length=255,
        description="Property listing title",
        examples=["Sunny 2BR apartment near the marina"]
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Detailed property description"
    )

    property_type_id: int = Field(..., ge=1, description="Property type id")
    location_id: int = Field(..., ge=1, description="Location id")

    address: str = Field(..., min_length=1, max_length=500, description="Street address")

    price: Decimal = Field(..., gt=0, description="Asking price or monthly rent")
    size: Optional[Decimal] = Field(None, gt=0, description="Floor area")
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    year_built: Optional[int] = Field(None, ge=1000, le=3000)

    listing_type: ListingType = Field(..., description="for-sale or for-rent")
    status: PropertyStatus = Field(PropertyStatus.AVAILABLE, description="Availability of the listing")

    feature_ids: List[int] = Field(default_factory=list, description="Feature ids to attach")

    @field_validator('title', 'description', 'address')
    @classmethod
    def validate_not_blank(cls, v):
        """Strip surrounding whitespace and reject blank text."""
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator('price')
    @classmethod
    def validate_price(cls, v):
        """Validate price value."""
        if v > Decimal('9999999999.99'):
            raise ValueError("Price exceeds maximum allowed value")
        return v


class PropertyUpdate(CamelModel):
    """
    Schema for updating an existing property.
    Only the fields that are sent are changed; ``featureIds`` replaces the
    whole feature set when present.
    """

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    property_type_id: Optional[int] = Field(None, ge=1)
    location_id: Optional[int] = Field(None, ge=1)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    price: Optional[Decimal] = Field(None, gt=0)
    size: Optional[Decimal] = Field(None, gt=0)
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    year_built: Optional[int] = Field(None, ge=1000, le=3000)
    listing_type: Optional[ListingType] = None
    status: Optional[PropertyStatus] = None
    feature_ids: Optional[List[int]] = None

    @field_validator('title', 'description', 'address')
    @classmethod
    def validate_not_blank(cls, v):
        """Validate and clean text fields."""
        if v is not None:
            if not v.strip():
                raise ValueError("Value cannot be empty")
            return v.strip()
        return v
