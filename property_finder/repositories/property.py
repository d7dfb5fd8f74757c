"""
Property repository for listing storage and filtered search.
Pushes search predicates, ordering and paging down to SQL and loads the
related rows each listing view needs in a fixed number of queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from property_finder.repositories.base import BaseRepository
from property_finder.models.property import Property
from property_finder.models.lookup import Feature
from property_finder.search.pagination import PropertyStore
from property_finder.search.predicates import PropertyPredicate
from property_finder.search.snapshots import PropertySnapshot, snapshot_properties
from property_finder.utils.exceptions import StorageUnavailableError
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def _with_details(query):
    """Eagerly load everything the listing views read."""
    return query.options(
        selectinload(Property.property_type),
        selectinload(Property.location),
        selectinload(Property.owner),
        selectinload(Property.images),
        selectinload(Property.features),
    )


class PropertyRepository(BaseRepository[Property], PropertyStore):
    """
    Repository for property listings.
    Implements the search store contract with SQL pushdown and provides the
    write operations used by the property service.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def count_matching(self, predicate: PropertyPredicate) -> int:
        """
        Count properties matching a search predicate.

        Args:
            predicate: Search predicate to apply

        Returns:
            Number of matching properties

        Raises:
            StorageUnavailableError: If the database read fails
        """
        query = select(func.count(Property.id)).where(predicate.condition())
        try:
            result = await self.db.execute(query)
            total = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Failed to count properties for {predicate!r}: {e}")
            raise StorageUnavailableError() from e

        logger.debug(f"Counted {total} properties for {predicate!r}")
        return total

    async def fetch_matching(
        self,
        predicate: PropertyPredicate,
        offset: int,
        limit: int
    ) -> List[PropertySnapshot]:
        """
        Fetch one slice of the properties matching a search predicate.

        Rows come back newest first with the id as tiebreak, with type,
        location, owner, images and features already loaded.

        Args:
            predicate: Search predicate to apply
            offset: Number of matching rows to skip
            limit: Maximum number of rows to return

        Returns:
            Snapshots of the matching properties

        Raises:
            StorageUnavailableError: If the database read fails
        """
        query = (
            _with_details(select(Property))
            .where(predicate.condition())
            .order_by(Property.created_at.desc(), Property.id.desc())
            .offset(offset)
            .limit(limit)
        )
        try:
            result = await self.db.execute(query)
            rows = result.scalars().all()
            snapshots = snapshot_properties(rows)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch properties for {predicate!r}: {e}")
            raise StorageUnavailableError() from e

        logger.debug(f"Fetched {len(snapshots)} properties at offset {offset} for {predicate!r}")
        return snapshots

    async def get_property_with_details(self, property_id: int) -> Optional[Property]:
        """
        Get property with all related data.

        Args:
            property_id: ID of the property

        Returns:
            Property with loaded relationships or None if not found
        """
        try:
            query = (
                _with_details(select(Property))
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with details: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def get_features(self, feature_ids: List[int]) -> List[Feature]:
        """
        Load features by id, ignoring duplicates.

        Args:
            feature_ids: Requested feature ids

        Returns:
            Existing features ordered by id
        """
        if not feature_ids:
            return []
        result = await self.db.execute(
            select(Feature).where(Feature.id.in_(set(feature_ids))).order_by(Feature.id)
        )
        return list(result.scalars().all())

    async def create_property(
        self,
        property_data: Dict[str, Any],
        features: Optional[List[Feature]] = None
    ) -> Property:
        """
        Create a new property and attach its features.

        Args:
            property_data: Column values for the new property
            features: Features to attach

        Returns:
            Created property with relationships loaded
        """
        try:
            property_obj = Property(**property_data)
            property_obj.features = list(features or [])
            self.db.add(property_obj)
            await self.db.commit()

            logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id})")
            return await self.get_property_with_details(property_obj.id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

    async def update_property(
        self,
        property_obj: Property,
        update_data: Dict[str, Any],
        features: Optional[List[Feature]] = None
    ) -> Property:
        """
        Apply a partial update to a loaded property.

        Args:
            property_obj: Property loaded with its relationships
            update_data: Column values to change
            features: Replacement feature set, or None to keep the current one

        Returns:
            Updated property with relationships reloaded
        """
        try:
            for field, value in update_data.items():
                setattr(property_obj, field, value)
            if features is not None:
                property_obj.features = list(features)
            property_obj.updated_at = datetime.now(timezone.utc)

            await self.db.commit()

            logger.info(f"Updated property {property_obj.id}: {sorted(update_data)}")
            return await self.get_property_with_details(property_obj.id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_obj.id}: {e}")
            raise

    async def delete_property(self, property_obj: Property) -> None:
        """
        Delete a property together with its images and feature links.

        Args:
            property_obj: Property loaded with its relationships
        """
        property_id = property_obj.id
        try:
            await self.db.delete(property_obj)
            await self.db.commit()
            logger.info(f"Deleted property {property_id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise
