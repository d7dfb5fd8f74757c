"""
PropertyImage model for images attached to a listing.
"""

from sqlalchemy import String, Boolean, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from property_finder.database import Base
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from property_finder.models.property import Property


class PropertyImage(Base):
    """
    Image stored for a property. Several images may carry the primary flag;
    readers pick the first flagged one.
    """

    __tablename__ = "property_images"

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    image_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Public URL of the stored image"
    )

    caption: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )

    is_primary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Whether this is the primary image for the property"
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="images",
        lazy="raise"
    )

    def __repr__(self) -> str:
        """String representation of the property image."""
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, primary={self.is_primary})>"


# Index for finding images by property, primary first
property_images_index = Index(
    'idx_property_images_property_primary',
    PropertyImage.property_id,
    PropertyImage.is_primary.desc()
)
