"""
Lookup service for the reference data clients use to build search filters.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from property_finder.repositories.lookup import (
    PropertyTypeRepository,
    LocationRepository,
    FeatureRepository,
)
from property_finder.schemas.property import LookupResponse, LocationResponse, FeatureResponse
from typing import List


class LookupService:
    """Lists property types, locations and features."""

    def __init__(self, db_session: AsyncSession):
        self.type_repo = PropertyTypeRepository(db_session)
        self.location_repo = LocationRepository(db_session)
        self.feature_repo = FeatureRepository(db_session)

    async def list_property_types(self) -> List[LookupResponse]:
        types = await self.type_repo.get_multi(limit=1000, order_by="name")
        return [LookupResponse.model_validate(item) for item in types]

    async def list_locations(self) -> List[LocationResponse]:
        locations = await self.location_repo.get_multi(limit=1000, order_by="name")
        return [LocationResponse.model_validate(item) for item in locations]

    async def list_features(self) -> List[FeatureResponse]:
        features = await self.feature_repo.get_multi(limit=1000, order_by="name")
        return [FeatureResponse.model_validate(item) for item in features]
