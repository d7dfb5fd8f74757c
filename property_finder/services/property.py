"""
Property service for listing management.
Handles ownership checks, feature resolution and detail views.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from property_finder.models.property import Property
from property_finder.models.lookup import Feature
from property_finder.models.user import User
from property_finder.repositories.property import PropertyRepository
from property_finder.repositories.lookup import PropertyTypeRepository, LocationRepository
from property_finder.schemas.property import PropertyCreate, PropertyUpdate, PropertyDetail
from property_finder.search.projector import to_detail
from property_finder.search.snapshots import PropertySnapshot
from property_finder.utils.exceptions import (
    PropertyNotFoundError,
    PropertyOwnershipError,
    ValidationError,
)
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

# Columns that may be changed but never cleared
REQUIRED_FIELDS = frozenset({
    "title", "description", "property_type_id", "location_id",
    "address", "price", "listing_type", "status",
})


def _detail_of(property_obj: Property) -> PropertyDetail:
    return to_detail(PropertySnapshot.model_validate(property_obj))


class PropertyService:
    """
    Property service implementing business rules for listings.
    Only the owner of a property may change or remove it.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.type_repo = PropertyTypeRepository(db_session)
        self.location_repo = LocationRepository(db_session)

    async def get_property(self, property_id: int) -> PropertyDetail:
        """
        Get the detail view of a property.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self._get_existing(property_id)
        return _detail_of(property_obj)

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> PropertyDetail:
        """
        Create a new property owned by the current user.

        Args:
            property_data: Property creation data
            current_user: Authenticated user who becomes the owner

        Returns:
            Detail view of the created property

        Raises:
            ValidationError: If a referenced type, location or feature doesn't exist
        """
        await self._check_references(property_data.property_type_id, property_data.location_id)
        features = await self._resolve_features(property_data.feature_ids)

        create_data = self._column_values(property_data.model_dump(exclude={"feature_ids"}))
        create_data["owner_id"] = current_user.id

        property_obj = await self.property_repo.create_property(create_data, features)
        logger.info(f"Property created by user {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
        return _detail_of(property_obj)

    async def update_property(
        self,
        property_id: int,
        property_data: PropertyUpdate,
        current_user: User
    ) -> PropertyDetail:
        """
        Update an existing property with ownership validation.
        Only fields present in the request are changed.

        Args:
            property_id: ID of the property to update
            property_data: Property update data
            current_user: Current authenticated user

        Returns:
            Detail view of the updated property

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If user doesn't own the property
            ValidationError: If a referenced type, location or feature doesn't exist
        """
        property_obj = await self._get_owned(property_id, current_user)

        update_data = property_data.model_dump(exclude_unset=True)
        feature_ids = update_data.pop("feature_ids", None)
        cleared = sorted(field for field in REQUIRED_FIELDS if field in update_data and update_data[field] is None)
        if cleared:
            raise ValidationError(f"Fields cannot be null: {cleared}")

        await self._check_references(update_data.get("property_type_id"), update_data.get("location_id"))
        features = await self._resolve_features(feature_ids) if feature_ids is not None else None

        property_obj = await self.property_repo.update_property(
            property_obj,
            self._column_values(update_data),
            features
        )
        logger.info(f"Property updated by user {current_user.email}: {property_id}")
        return _detail_of(property_obj)

    async def delete_property(self, property_id: int, current_user: User) -> None:
        """
        Delete a property with ownership validation.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If user doesn't own the property
        """
        property_obj = await self._get_owned(property_id, current_user)
        await self.property_repo.delete_property(property_obj)
        logger.info(f"Property deleted by user {current_user.email}: {property_id}")

    async def get_owned_property(self, property_id: int, current_user: User) -> Property:
        """Load a property the current user owns, for attaching images."""
        return await self._get_owned(property_id, current_user)

    async def _get_existing(self, property_id: int) -> Property:
        property_obj = await self.property_repo.get_property_with_details(property_id)
        if not property_obj:
            raise PropertyNotFoundError(property_id)
        return property_obj

    async def _get_owned(self, property_id: int, current_user: User) -> Property:
        property_obj = await self._get_existing(property_id)
        if not current_user.owns(property_obj.owner_id):
            logger.warning(f"User {current_user.id} tried to modify property {property_id} owned by {property_obj.owner_id}")
            raise PropertyOwnershipError()
        return property_obj

    async def _check_references(self, property_type_id, location_id) -> None:
        if property_type_id is not None and not await self.type_repo.get_by_id(property_type_id):
            raise ValidationError(f"Property type {property_type_id} does not exist")
        if location_id is not None and not await self.location_repo.get_by_id(location_id):
            raise ValidationError(f"Location {location_id} does not exist")

    async def _resolve_features(self, feature_ids: List[int]) -> List[Feature]:
        features = await self.property_repo.get_features(feature_ids)
        missing = sorted(set(feature_ids) - {feature.id for feature in features})
        if missing:
            raise ValidationError(f"Unknown feature ids: {missing}")
        return features

    @staticmethod
    def _column_values(data: Dict[str, Any]) -> Dict[str, Any]:
        # Listing type and status are stored as their string values
        for field in ("listing_type", "status"):
            if data.get(field) is not None:
                data[field] = data[field].value
        return data
