"""
Pydantic schemas for user requests and responses.
Handles registration and public user data.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from property_finder.models.user import UserType
from property_finder.schemas.base import CamelModel, CamelORMModel


class UserCreate(CamelModel):
    """Schema for registering a new user."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Unique login handle",
        examples=["jane.doe"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["jane@example.com"]
    )

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="User's password (minimum 8 characters)"
    )

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=50)
    user_type: UserType = Field(UserType.OWNER, description="Account kind")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        """Require at least one letter and one digit."""
        if not any(c.isalpha() for c in v) or not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one letter and one number")
        return v


class UserResponse(CamelORMModel):
    """User response schema (excluding sensitive data)."""

    id: int
    username: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    user_type: UserType
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
