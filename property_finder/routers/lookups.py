"""
Lookup endpoints listing the locations and features used in search filters.
"""

from fastapi import APIRouter, Depends
from typing import List
from property_finder.services.lookup import LookupService
from property_finder.schemas.property import LocationResponse, FeatureResponse
from property_finder.utils.dependencies import get_lookup_service


router = APIRouter(tags=["Lookups"])


@router.get("/locations", response_model=List[LocationResponse], summary="List locations")
async def list_locations(
    lookup_service: LookupService = Depends(get_lookup_service)
) -> List[LocationResponse]:
    return await lookup_service.list_locations()


@router.get("/features", response_model=List[FeatureResponse], summary="List features")
async def list_features(
    lookup_service: LookupService = Depends(get_lookup_service)
) -> List[FeatureResponse]:
    return await lookup_service.list_features()
