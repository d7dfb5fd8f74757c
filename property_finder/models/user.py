"""
User model with authentication and profile data.
Handles accounts for agents, owners and property seekers.
"""

from sqlalchemy import String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from property_finder.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from datetime import datetime
import enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from property_finder.models.property import Property
    from property_finder.models.engagement import Inquiry, Review

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserType(str, enum.Enum):
    """Kind of account."""
    AGENT = "agent"
    OWNER = "owner"
    SEEKER = "seeker"


class User(Base):
    """
    User model for authentication and property ownership.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique login handle"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Profile information
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    profile_picture_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    user_type: Mapped[UserType] = mapped_column(
        SQLEnum(UserType),
        nullable=False,
        default=UserType.OWNER,
        comment="Account kind: agent, owner or seeker"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the user account is active"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        lazy="raise"
    )

    sent_inquiries: Mapped[List["Inquiry"]] = relationship(
        "Inquiry",
        back_populates="sender",
        foreign_keys="Inquiry.sender_id",
        lazy="raise"
    )

    received_inquiries: Mapped[List["Inquiry"]] = relationship(
        "Inquiry",
        back_populates="receiver",
        foreign_keys="Inquiry.receiver_id",
        lazy="raise"
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="user",
        lazy="raise"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, username={self.username}, type={self.user_type})>"

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the username."""
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """
        Verify a password against the stored hash.

        Args:
            password: Plain text password to verify

        Returns:
            True if password matches, False otherwise
        """
        return pwd_context.verify(password, self.hashed_password)

    def owns(self, owner_id: int) -> bool:
        """Check if this user is the owner referenced by ``owner_id``."""
        return self.id == owner_id
