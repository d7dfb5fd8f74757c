"""
Repositories for the lookup tables used to classify properties.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from property_finder.repositories.base import BaseRepository
from property_finder.models.lookup import PropertyType, Location, Feature


class PropertyTypeRepository(BaseRepository[PropertyType]):
    def __init__(self, db: AsyncSession):
        super().__init__(PropertyType, db)


class LocationRepository(BaseRepository[Location]):
    def __init__(self, db: AsyncSession):
        super().__init__(Location, db)


class FeatureRepository(BaseRepository[Feature]):
    def __init__(self, db: AsyncSession):
        super().__init__(Feature, db)
