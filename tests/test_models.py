"""
Tests for database models and the lookup seeding helper.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, InvalidRequestError

from property_finder.models.engagement import Inquiry, Review
from property_finder.models.lookup import Feature, Location, PropertyType
from property_finder.models.property import Property
from property_finder.models.user import User, UserType
from property_finder.seed import FEATURES, LOCATIONS, PROPERTY_TYPES, seed_lookups


class TestUserModel:
    """Test User model validation and methods."""

    def test_display_name_uses_full_name(self):
        user = User(username="mona", email="mona@example.com", first_name="Mona", last_name="Adel")

        assert user.display_name == "Mona Adel"

    def test_display_name_with_partial_name(self):
        assert User(username="mona", email="m@example.com", last_name="Adel").display_name == "Adel"

    def test_display_name_falls_back_to_username(self):
        assert User(username="mona", email="m@example.com").display_name == "mona"

    @pytest.mark.parametrize("email", ["test@example.com", "user.name@domain.co.uk", "user+tag@example.org"])
    def test_email_validation_valid(self, email):
        assert User.validate_email_format(email) == email.lower()

    @pytest.mark.parametrize("email", ["invalid-email", "@example.com", "test@", ""])
    def test_email_validation_invalid(self, email):
        with pytest.raises(ValueError):
            User.validate_email_format(email)

    def test_password_hashing(self):
        hashed = User.hash_password("correct1horse")
        user = User(username="u", email="u@example.com", hashed_password=hashed)

        assert hashed != "correct1horse"
        assert user.verify_password("correct1horse")
        assert not user.verify_password("wrong1horse")

    def test_short_password_is_rejected(self):
        with pytest.raises(ValueError):
            User.hash_password("short1")

    def test_owns(self):
        user = User(id=7, username="u", email="u@example.com", user_type=UserType.AGENT)

        assert user.owns(7)
        assert not user.owns(8)


class TestSeedLookups:
    """Test seeding of property types, locations and features."""

    @pytest.mark.asyncio
    async def test_seed_inserts_defaults(self, db_session):
        inserted = await seed_lookups(db_session)

        assert inserted == {
            "property_types": len(PROPERTY_TYPES),
            "locations": len(LOCATIONS),
            "features": len(FEATURES),
        }

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_session, lookups):
        await seed_lookups(db_session)
        second = await seed_lookups(db_session)

        assert second == {"property_types": 0, "locations": 0, "features": 0}
        type_count = (await db_session.execute(select(func.count(PropertyType.id)))).scalar_one()
        feature_count = (await db_session.execute(select(func.count(Feature.id)))).scalar_one()
        location_count = (await db_session.execute(select(func.count(Location.id)))).scalar_one()
        assert type_count == len(PROPERTY_TYPES)
        assert feature_count == len(FEATURES)
        assert location_count == len({location["name"] for location in LOCATIONS} | {"Marina"})


class TestEngagementModels:
    """Test inquiries and reviews attached to a listing."""

    @pytest.mark.asyncio
    async def test_inquiry_links_sender_and_owner(self, db_session, test_property, other_owner):
        inquiry = Inquiry(
            property_id=test_property.id,
            sender_id=other_owner.id,
            receiver_id=test_property.owner_id,
            message="Is the flat still available?",
        )
        db_session.add(inquiry)
        await db_session.commit()

        assert inquiry.id is not None

    @pytest.mark.asyncio
    async def test_review_rating_must_be_in_range(self, db_session, test_property, other_owner):
        db_session.add(Review(property_id=test_property.id, user_id=other_owner.id, rating=5, comment="Great"))
        await db_session.commit()

        db_session.add(Review(property_id=test_property.id, user_id=other_owner.id, rating=6))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

        count = (await db_session.execute(select(func.count(Review.id)))).scalar_one()
        assert count == 1

    @pytest.mark.asyncio
    async def test_engagement_collections_are_never_lazy_loaded(self, test_property):
        with pytest.raises(InvalidRequestError):
            test_property.inquiries
        with pytest.raises(InvalidRequestError):
            test_property.reviews

    @pytest.mark.asyncio
    async def test_property_with_inquiry_can_be_deleted(self, db_session, test_property, other_owner):
        inquiry = Inquiry(
            property_id=test_property.id,
            sender_id=other_owner.id,
            receiver_id=test_property.owner_id,
            message="Still available?",
        )
        db_session.add(inquiry)
        await db_session.commit()
        db_session.expunge(inquiry)
        property_id = test_property.id

        await db_session.delete(test_property)
        await db_session.commit()

        remaining = (await db_session.execute(select(func.count(Property.id)).where(Property.id == property_id))).scalar_one()
        assert remaining == 0
