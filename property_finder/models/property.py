"""
Property model for sale and rental listings.
Handles listing data, classification references and relationship management.
"""

from sqlalchemy import String, Text, Integer, Numeric, DateTime, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from property_finder.database import Base
from property_finder.models.lookup import property_features
from datetime import datetime
from decimal import Decimal
import enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from property_finder.models.user import User
    from property_finder.models.image import PropertyImage
    from property_finder.models.lookup import PropertyType, Location, Feature
    from property_finder.models.engagement import Inquiry, Review


class ListingType(str, enum.Enum):
    """Whether the property is offered for sale or for rent."""
    FOR_SALE = "for-sale"
    FOR_RENT = "for-rent"


class PropertyStatus(str, enum.Enum):
    """Availability of the listing."""
    AVAILABLE = "available"
    SOLD = "sold"
    RENTED = "rented"


class Property(Base):
    """
    Property listing owned by a user.
    Classification is stored as explicit foreign keys to the lookup tables.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    property_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("property_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    location_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    address: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Street address"
    )

    # Pricing and size
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Asking price or monthly rent"
    )

    size: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=True,
        comment="Floor area"
    )

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Listing metadata, compared as exact strings by the search filters
    listing_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="for-sale or for-rent"
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PropertyStatus.AVAILABLE.value,
        comment="available, sold or rented"
    )

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Relationships
    property_type: Mapped["PropertyType"] = relationship("PropertyType", lazy="selectin")

    location: Mapped["Location"] = relationship("Location", lazy="selectin")

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.is_primary.desc(), PropertyImage.created_at.asc(), PropertyImage.id.asc()"
    )

    features: Mapped[List["Feature"]] = relationship(
        "Feature",
        secondary=property_features,
        lazy="selectin",
        order_by="Feature.id"
    )

    inquiries: Mapped[List["Inquiry"]] = relationship(
        "Inquiry",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise"
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"


# Newest-first listing order with id tiebreak
created_order_index = Index(
    'idx_properties_created_id',
    Property.created_at.desc(),
    Property.id.desc()
)

# Composite index for the common location + price search
location_price_index = Index(
    'idx_properties_location_price',
    Property.location_id,
    Property.price
)

type_listing_index = Index(
    'idx_properties_type_listing',
    Property.property_type_id,
    Property.listing_type
)
