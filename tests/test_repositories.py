"""
Tests for repository classes against an in-memory SQLite database.
The SQL search path is checked against the in-memory store for the same data.
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from sqlalchemy.exc import OperationalError

from property_finder.models.user import UserType
from property_finder.repositories.lookup import FeatureRepository, LocationRepository
from property_finder.schemas.property import PropertyFilter
from property_finder.search.pagination import InMemoryPropertyStore, paginate
from property_finder.search.predicates import PropertyPredicate, build_predicate
from property_finder.utils.exceptions import DuplicateResourceError, StorageUnavailableError
from tests.conftest import ImageFactory, PropertyFactory, UserFactory


START = datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
async def catalogue(property_repository, test_owner, lookups):
    """Eight listings with distinct creation times and mixed attributes."""
    types = lookups["types"]
    locations = lookups["locations"]
    features = lookups["features"]
    rows = [
        # price, bedrooms, bathrooms, listing type, type, location, features
        ("90000", 1, 1, "for-sale", 0, 0, []),
        ("150000", 2, 1, "for-sale", 0, 1, [0]),
        ("250000", 2, 2, "for-rent", 1, 0, [0, 1]),
        ("300000", 3, None, "for-sale", 1, 1, [0, 1, 2]),
        ("400000", None, 2, "for-sale", 0, 0, [0, 1, 2, 3]),
        ("120000", 2, 1, "for-rent", 1, 1, [2]),
        ("300000", 4, 3, "for-sale", 0, 0, [1, 2]),
        ("75000", 0, 1, "for-rent", 1, 0, []),
    ]
    created = []
    for index, (price, beds, baths, listing, type_index, location_index, feature_indexes) in enumerate(rows):
        created.append(await PropertyFactory.create_property(
            property_repository,
            owner_id=test_owner.id,
            property_type_id=types[type_index].id,
            location_id=locations[location_index].id,
            features=[features[i] for i in feature_indexes],
            title=f"Listing {index}",
            price=Decimal(price),
            bedrooms=beds,
            bathrooms=baths,
            listing_type=listing,
            created_at=START + timedelta(hours=index),
        ))
    return created


class TestUserRepository:
    """Test UserRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_user_hashes_password(self, user_repository):
        user = await UserFactory.create_user(user_repository, email="NewUser@Example.com")

        assert user.id is not None
        assert user.email == "newuser@example.com"
        assert user.hashed_password != "testpassword123"
        assert user.verify_password("testpassword123")
        assert user.user_type == UserType.OWNER

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, user_repository, test_owner):
        with pytest.raises(DuplicateResourceError):
            await UserFactory.create_user(user_repository, email=test_owner.email)

    @pytest.mark.asyncio
    async def test_duplicate_username_is_rejected(self, user_repository, test_owner):
        with pytest.raises(DuplicateResourceError):
            await UserFactory.create_user(user_repository, username=test_owner.username)

    @pytest.mark.asyncio
    async def test_invalid_email_is_rejected(self, user_repository):
        with pytest.raises(ValueError):
            await UserFactory.create_user(user_repository, email="not-an-email")

    @pytest.mark.asyncio
    async def test_authenticate_user(self, user_repository, test_owner):
        assert (await user_repository.authenticate_user("owner@test.com", "testpassword123")).id == test_owner.id
        assert await user_repository.authenticate_user("owner@test.com", "wrongpassword1") is None
        assert await user_repository.authenticate_user("nobody@test.com", "testpassword123") is None


class TestPropertyRepositoryWrites:
    """Test property creation, update and deletion."""

    @pytest.mark.asyncio
    async def test_create_property_loads_relationships(self, test_property, test_owner, lookups):
        assert test_property.id is not None
        assert test_property.owner.id == test_owner.id
        assert test_property.property_type.name == "Apartment"
        assert test_property.location.name == "Downtown"
        assert [feature.name for feature in test_property.features] == ["Swimming Pool", "Garden"]
        assert test_property.images == []

    @pytest.mark.asyncio
    async def test_update_property_replaces_features(self, property_repository, test_property, lookups):
        updated = await property_repository.update_property(
            test_property,
            {"price": Decimal("1750.00"), "bedrooms": None},
            lookups["features"][2:],
        )

        assert updated.price == Decimal("1750.00")
        assert updated.bedrooms is None
        assert [feature.name for feature in updated.features] == ["Parking", "Elevator"]
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_update_without_features_keeps_them(self, property_repository, test_property):
        updated = await property_repository.update_property(test_property, {"title": "Renamed"}, None)

        assert updated.title == "Renamed"
        assert len(updated.features) == 2

    @pytest.mark.asyncio
    async def test_delete_property_removes_images(self, property_repository, image_repository, test_property):
        image = await ImageFactory.create_image(image_repository, test_property.id)
        property_obj = await property_repository.get_property_with_details(test_property.id)

        await property_repository.delete_property(property_obj)

        assert await property_repository.get_property_with_details(test_property.id) is None
        assert await image_repository.get_by_id(image.id) is None

    @pytest.mark.asyncio
    async def test_get_features_ignores_unknown_and_duplicates(self, property_repository, lookups):
        first = lookups["features"][0]

        features = await property_repository.get_features([first.id, first.id, 9999])

        assert [feature.id for feature in features] == [first.id]


class TestImageRepository:
    """Test primary image handling."""

    @pytest.mark.asyncio
    async def test_new_primary_clears_previous(self, property_repository, image_repository, test_property):
        first = await ImageFactory.create_image(image_repository, test_property.id, is_primary=True)
        second = await ImageFactory.create_image(image_repository, test_property.id, is_primary=True)

        reloaded = await property_repository.get_property_with_details(test_property.id)

        flags = {image.id: image.is_primary for image in reloaded.images}
        assert flags == {first.id: False, second.id: True}

    @pytest.mark.asyncio
    async def test_non_primary_keeps_existing_primary(self, property_repository, image_repository, test_property):
        primary = await ImageFactory.create_image(image_repository, test_property.id, is_primary=True)
        await ImageFactory.create_image(image_repository, test_property.id)

        reloaded = await property_repository.get_property_with_details(test_property.id)

        assert [image.id for image in reloaded.images if image.is_primary] == [primary.id]


class TestPropertySearchStore:
    """Test the SQL-backed search store."""

    @pytest.mark.asyncio
    async def test_fetch_orders_newest_first(self, property_repository, catalogue):
        snapshots = await property_repository.fetch_matching(PropertyPredicate(), offset=0, limit=100)

        assert [snapshot.id for snapshot in snapshots] == [obj.id for obj in reversed(catalogue)]

    @pytest.mark.asyncio
    async def test_equal_creation_times_order_by_id(self, property_repository, test_owner, lookups):
        created_at = datetime(2024, 5, 5, 5, 5, 5)
        ids = []
        for _ in range(3):
            property_obj = await PropertyFactory.create_property(
                property_repository,
                owner_id=test_owner.id,
                property_type_id=lookups["types"][0].id,
                location_id=lookups["locations"][0].id,
                created_at=created_at,
            )
            ids.append(property_obj.id)

        snapshots = await property_repository.fetch_matching(PropertyPredicate(), offset=0, limit=10)

        assert [snapshot.id for snapshot in snapshots] == sorted(ids, reverse=True)

    @pytest.mark.asyncio
    async def test_feature_superset_in_sql(self, property_repository, catalogue, lookups):
        wanted = [feature.id for feature in lookups["features"][:3]]
        predicate = build_predicate(PropertyFilter(features=tuple(wanted) + (wanted[0],)))

        total = await property_repository.count_matching(predicate)
        snapshots = await property_repository.fetch_matching(predicate, offset=0, limit=10)

        assert total == 2
        assert [snapshot.title for snapshot in snapshots] == ["Listing 4", "Listing 3"]

    @pytest.mark.asyncio
    async def test_snapshots_carry_related_records(self, property_repository, image_repository, catalogue):
        await ImageFactory.create_image(image_repository, catalogue[4].id, is_primary=True)

        snapshots = await property_repository.fetch_matching(PropertyPredicate(), offset=3, limit=1)

        snapshot = snapshots[0]
        assert snapshot.title == "Listing 4"
        assert snapshot.owner.username == "owner"
        assert snapshot.property_type.name == "Apartment"
        assert len(snapshot.features) == 4
        assert len(snapshot.images) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("criteria", [
        {},
        {"min_price": Decimal("100000"), "max_price": Decimal("300000")},
        {"min_price": Decimal("300000"), "max_price": Decimal("300000")},
        {"bedrooms": 2},
        {"bathrooms": 2},
        {"listing_type": "for-rent"},
        {"listing_type": "For-Rent"},
        {"bedrooms": 2, "max_price": Decimal("299999")},
        {"min_price": Decimal("500000")},
    ])
    async def test_sql_matches_in_memory_store(self, property_repository, catalogue, criteria):
        everything = await property_repository.fetch_matching(PropertyPredicate(), offset=0, limit=100)
        memory_store = InMemoryPropertyStore(everything)
        predicate = build_predicate(PropertyFilter(**criteria))

        for page in (1, 2, 3):
            from_sql = await paginate(property_repository, predicate, page=page, page_size=3)
            from_memory = await paginate(memory_store, predicate, page=page, page_size=3)

            assert from_sql.total_count == from_memory.total_count
            assert [item.id for item in from_sql.items] == [item.id for item in from_memory.items]

    @pytest.mark.asyncio
    async def test_location_and_type_in_sql(self, property_repository, catalogue, lookups):
        predicate = build_predicate(PropertyFilter(
            location_id=lookups["locations"][0].id,
            property_type_id=lookups["types"][1].id,
        ))

        snapshots = await property_repository.fetch_matching(predicate, offset=0, limit=10)

        assert [snapshot.title for snapshot in snapshots] == ["Listing 7", "Listing 2"]

    @pytest.mark.asyncio
    async def test_read_failure_raises_storage_unavailable(self, property_repository, db_session, monkeypatch):
        async def failing_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(db_session, "execute", failing_execute)

        with pytest.raises(StorageUnavailableError) as exc_info:
            await property_repository.count_matching(PropertyPredicate())
        assert exc_info.value.status_code == 503

        with pytest.raises(StorageUnavailableError):
            await property_repository.fetch_matching(PropertyPredicate(), offset=0, limit=10)


class TestLookupRepositories:
    @pytest.mark.asyncio
    async def test_get_multi_orders_by_name(self, db_session, lookups):
        features = await FeatureRepository(db_session).get_multi(order_by="name")
        locations = await LocationRepository(db_session).get_multi(order_by="-name")

        assert [feature.name for feature in features] == ["Elevator", "Garden", "Parking", "Swimming Pool"]
        assert [location.name for location in locations] == ["Marina", "Downtown"]
