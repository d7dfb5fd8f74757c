"""
Test configuration and fixtures for the Property Finder API.
Provides database fixtures, test data factories, snapshot builders and common test utilities.
"""

import os
import tempfile

# Settings are read once at import time; point them at throwaway resources first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="property_finder_uploads_"))

import io
import uuid
import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Iterable, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from PIL import Image

from property_finder.main import app
from property_finder.database import Base, get_db
from property_finder.models.user import User, UserType
from property_finder.models.property import Property, ListingType
from property_finder.models.lookup import PropertyType, Location, Feature
from property_finder.models.image import PropertyImage
from property_finder.repositories.user import UserRepository
from property_finder.repositories.property import PropertyRepository
from property_finder.repositories.image import ImageRepository
from property_finder.search.snapshots import (
    PropertySnapshot,
    OwnerSnapshot,
    LookupSnapshot,
    FeatureSnapshot,
    ImageSnapshot,
)
from property_finder.utils.auth import create_access_token


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with one database session per request."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def image_repository(db_session: AsyncSession) -> ImageRepository:
    return ImageRepository(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        username: str = None,
        email: str = None,
        password: str = "testpassword123",
        first_name: Optional[str] = "Test",
        last_name: Optional[str] = "Owner",
        user_type: UserType = UserType.OWNER,
        is_active: bool = True
    ) -> dict:
        """Create user data dictionary."""
        suffix = uuid.uuid4().hex[:8]
        return {
            "username": username or f"user_{suffix}",
            "email": email or f"test{suffix}@example.com",
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "user_type": user_type,
            "is_active": is_active
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **kwargs) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**kwargs))


class LookupFactory:
    """Factory for property types, locations and features."""

    @staticmethod
    async def create_lookups(session: AsyncSession) -> dict:
        """
        Create two property types, two locations and four features.

        Returns:
            Dictionary with ``types``, ``locations`` and ``features`` lists
        """
        types = [PropertyType(name="Apartment"), PropertyType(name="House")]
        locations = [
            Location(name="Downtown", city="Cairo", country="Egypt"),
            Location(name="Marina", city="Alexandria", country="Egypt"),
        ]
        features = [
            Feature(name="Swimming Pool", category="Outdoor"),
            Feature(name="Garden", category="Outdoor"),
            Feature(name="Parking", category="Building"),
            Feature(name="Elevator", category="Building"),
        ]
        session.add_all(types + locations + features)
        await session.commit()
        return {"types": types, "locations": locations, "features": features}


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: int,
        property_type_id: int,
        location_id: int,
        title: str = "Test Property",
        description: str = "A beautiful test property",
        address: str = "1 Test Street",
        price: Decimal = Decimal("1000.00"),
        bedrooms: Optional[int] = 2,
        bathrooms: Optional[int] = 1,
        listing_type: str = ListingType.FOR_SALE.value,
        created_at: Optional[datetime] = None
    ) -> dict:
        """Create property data dictionary."""
        data = {
            "title": title,
            "description": description,
            "address": address,
            "price": price,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "listing_type": listing_type,
            "owner_id": owner_id,
            "property_type_id": property_type_id,
            "location_id": location_id,
        }
        if created_at is not None:
            data["created_at"] = created_at
        return data

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        owner_id: int,
        property_type_id: int,
        location_id: int,
        features: Sequence[Feature] = (),
        **kwargs
    ) -> Property:
        """Create a test property in the database."""
        data = PropertyFactory.create_property_data(
            owner_id=owner_id,
            property_type_id=property_type_id,
            location_id=location_id,
            **kwargs
        )
        return await property_repo.create_property(data, list(features))


class ImageFactory:
    """Factory for creating test property images."""

    @staticmethod
    async def create_image(
        image_repo: ImageRepository,
        property_id: int,
        is_primary: bool = False,
        caption: Optional[str] = None
    ) -> PropertyImage:
        """Create a test property image record."""
        return await image_repo.create({
            "property_id": property_id,
            "image_url": f"/uploads/properties/{property_id}/{uuid.uuid4().hex}.jpg",
            "caption": caption,
            "is_primary": is_primary,
        })


def make_image_bytes(image_format: str = "PNG", size=(32, 24), color=(200, 30, 30)) -> bytes:
    """Render a small in-memory image with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def auth_headers(user: User) -> dict:
    """Bearer authorization header for a user."""
    token = create_access_token(user_id=user.id, email=user.email, user_type=user.user_type)
    return {"Authorization": f"Bearer {token}"}


# Snapshot builders for search tests that need no database
def make_owner(owner_id: int = 1, first_name: Optional[str] = "Mona", last_name: Optional[str] = "Adel") -> OwnerSnapshot:
    return OwnerSnapshot(
        id=owner_id,
        username=f"owner{owner_id}",
        email=f"owner{owner_id}@example.com",
        first_name=first_name,
        last_name=last_name,
        user_type=UserType.OWNER,
    )


def make_image(image_id: int, is_primary: bool = False) -> ImageSnapshot:
    return ImageSnapshot(
        id=image_id,
        image_url=f"/uploads/properties/{image_id}.jpg",
        is_primary=is_primary,
        created_at=BASE_TIME,
    )


def make_snapshot(
    property_id: int,
    price: str = "100000",
    bedrooms: Optional[int] = 2,
    bathrooms: Optional[int] = 1,
    location_id: int = 1,
    property_type_id: int = 1,
    listing_type: str = "for-sale",
    feature_ids: Iterable[int] = (),
    images: Sequence[ImageSnapshot] = (),
    created_at: Optional[datetime] = None,
    owner: Optional[OwnerSnapshot] = None
) -> PropertySnapshot:
    """
    Build a property snapshot. Without ``created_at`` the snapshot is created
    ``property_id`` minutes after ``BASE_TIME``, so ids follow creation order.
    """
    return PropertySnapshot(
        id=property_id,
        title=f"Property {property_id}",
        description="Test listing",
        address=f"{property_id} Test Street",
        property_type_id=property_type_id,
        location_id=location_id,
        owner_id=(owner or make_owner()).id,
        property_type=LookupSnapshot(id=property_type_id, name=f"Type {property_type_id}"),
        location=LookupSnapshot(id=location_id, name=f"Location {location_id}"),
        owner=owner or make_owner(),
        price=Decimal(price),
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        listing_type=listing_type,
        status="available",
        created_at=created_at or BASE_TIME + timedelta(minutes=property_id),
        images=tuple(images),
        features=tuple(FeatureSnapshot(id=feature_id, name=f"Feature {feature_id}") for feature_id in sorted(feature_ids)),
    )


# Common test fixtures
@pytest.fixture
async def lookups(db_session: AsyncSession) -> dict:
    return await LookupFactory.create_lookups(db_session)


@pytest.fixture
async def test_owner(user_repository: UserRepository) -> User:
    """Create a test owner user."""
    return await UserFactory.create_user(
        user_repository,
        username="owner",
        email="owner@test.com",
        first_name="Olivia",
        last_name="Owner"
    )


@pytest.fixture
async def other_owner(user_repository: UserRepository) -> User:
    """Create a second owner who owns nothing in the default fixtures."""
    return await UserFactory.create_user(
        user_repository,
        username="other",
        email="other@test.com",
        first_name=None,
        last_name=None
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_owner: User, lookups: dict) -> Property:
    """Create a test property with two features."""
    return await PropertyFactory.create_property(
        property_repository,
        owner_id=test_owner.id,
        property_type_id=lookups["types"][0].id,
        location_id=lookups["locations"][0].id,
        features=lookups["features"][:2],
        title="Test Property",
        price=Decimal("1500.00"),
        bedrooms=3
    )
