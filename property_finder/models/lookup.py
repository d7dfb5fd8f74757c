"""
Lookup entities used to classify and filter properties.
"""

from sqlalchemy import String, Table, Column, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column
from property_finder.database import Base
from typing import Optional


# Property <-> Feature association, no payload beyond the two keys
property_features = Table(
    "property_features",
    Base.metadata,
    Column("property_id", Integer, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    Column("feature_id", Integer, ForeignKey("features.id", ondelete="CASCADE"), primary_key=True),
)


class PropertyType(Base):
    """Kind of property (apartment, house, land...)."""

    __tablename__ = "property_types"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Display name of the property type"
    )

    def __repr__(self) -> str:
        return f"<PropertyType(id={self.id}, name={self.name})>"


class Location(Base):
    """Named area a property belongs to."""

    __tablename__ = "locations"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Display name of the location"
    )

    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name={self.name})>"


class Feature(Base):
    """Amenity that can be tagged on a property."""

    __tablename__ = "features"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Feature name, e.g. Swimming Pool"
    )

    category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Grouping used by clients, e.g. Outdoor"
    )

    icon_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Icon reference for clients"
    )

    def __repr__(self) -> str:
        return f"<Feature(id={self.id}, name={self.name})>"
