"""
Inquiries and reviews left on property listings.
"""

from sqlalchemy import Text, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from property_finder.database import Base
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from property_finder.models.property import Property
    from property_finder.models.user import User


class Inquiry(Base):
    """Message sent by a seeker to the owner of a property."""

    __tablename__ = "inquiries"

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    sender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    receiver_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    message: Mapped[str] = mapped_column(Text, nullable=False)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="inquiries", lazy="raise")
    sender: Mapped["User"] = relationship(
        "User", foreign_keys=[sender_id], back_populates="sent_inquiries", lazy="raise"
    )
    receiver: Mapped["User"] = relationship(
        "User", foreign_keys=[receiver_id], back_populates="received_inquiries", lazy="raise"
    )


class Review(Base):
    """Rating left by a user on a property."""

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="reviews", lazy="raise")
    user: Mapped["User"] = relationship("User", back_populates="reviews", lazy="raise")
