"""
Read-side value snapshots of fully loaded property rows.

Snapshots are immutable and carry related records by value together with
their identifiers, so the search pipeline never touches live ORM objects.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import FrozenSet, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from property_finder.models.user import UserType


class _Snapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class LookupSnapshot(_Snapshot):
    """Property type or location reference."""

    id: int
    name: str


class FeatureSnapshot(_Snapshot):
    id: int
    name: str
    category: Optional[str] = None
    icon_name: Optional[str] = None


class ImageSnapshot(_Snapshot):
    id: int
    image_url: str
    caption: Optional[str] = None
    is_primary: bool = False
    created_at: Optional[datetime] = None


class OwnerSnapshot(_Snapshot):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    user_type: UserType

    @property
    def display_name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username


class PropertySnapshot(_Snapshot):
    """
    A property with its type, location, owner, images and features loaded.

    ``images`` keeps the storage order (primary first); ``features`` keeps
    feature id order.
    """

    id: int
    title: str
    description: str
    address: str
    property_type_id: int
    location_id: int
    owner_id: int
    property_type: LookupSnapshot
    location: LookupSnapshot
    owner: OwnerSnapshot
    price: Decimal
    size: Optional[Decimal] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    year_built: Optional[int] = None
    listing_type: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    images: Tuple[ImageSnapshot, ...] = Field(default_factory=tuple)
    features: Tuple[FeatureSnapshot, ...] = Field(default_factory=tuple)

    @property
    def feature_ids(self) -> FrozenSet[int]:
        return frozenset(feature.id for feature in self.features)


def snapshot_properties(rows) -> List[PropertySnapshot]:
    """Convert loaded ORM ``Property`` rows into snapshots."""
    return [PropertySnapshot.model_validate(row) for row in rows]
