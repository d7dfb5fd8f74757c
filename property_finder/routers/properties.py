"""
Property API endpoints: filtered search, detail views, owner-only mutations
and image uploads.
"""

from fastapi import APIRouter, Depends, status, Query, Path, Response, UploadFile, File, Form
from typing import Optional, List
from decimal import Decimal

from property_finder.config import settings
from property_finder.models.user import User
from property_finder.services.image import ImageService
from property_finder.services.lookup import LookupService
from property_finder.services.property import PropertyService
from property_finder.services.search import PropertySearchService
from property_finder.schemas.property import (
    PropertyFilter,
    PropertySummary,
    PropertyDetail,
    PropertyCreate,
    PropertyUpdate,
    PropertyImageResponse,
    LookupResponse,
)
from property_finder.schemas.error import get_crud_error_responses, get_search_error_responses
from property_finder.utils.dependencies import (
    get_current_active_user,
    get_image_service,
    get_lookup_service,
    get_property_service,
    get_search_service,
)


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=List[PropertySummary],
    status_code=status.HTTP_200_OK,
    summary="Search properties",
    description=(
        "List properties matching every given filter, newest first. "
        "Paging metadata is returned in the X-Total-Count, X-Page, X-Page-Size "
        "and X-Total-Pages headers."
    ),
    responses=get_search_error_responses()
)
async def list_properties(
    response: Response,
    page: int = Query(1, description="Page number (starts from 1)"),
    page_size: int = Query(
        settings.default_page_size,
        alias="pageSize",
        le=settings.max_page_size,
        description="Number of properties per page"
    ),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", description="Inclusive minimum price"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", description="Inclusive maximum price"),
    location_id: Optional[int] = Query(None, alias="locationId", description="Location id"),
    property_type_id: Optional[int] = Query(None, alias="propertyTypeId", description="Property type id"),
    bedrooms: Optional[int] = Query(None, description="Minimum number of bedrooms"),
    bathrooms: Optional[int] = Query(None, description="Minimum number of bathrooms"),
    listing_type: Optional[str] = Query(None, alias="listingType", description="Exact listing type, e.g. for-sale"),
    features: List[int] = Query([], description="Feature ids that must all be present"),
    search_service: PropertySearchService = Depends(get_search_service)
) -> List[PropertySummary]:
    """
    Search properties with filtering and pagination.

    Returns:
        Property summaries on the requested page
    """
    filters = PropertyFilter(
        page=page,
        page_size=page_size,
        min_price=min_price,
        max_price=max_price,
        location_id=location_id,
        property_type_id=property_type_id,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        listing_type=listing_type,
        features=tuple(features),
    )
    result = await search_service.search(filters)

    response.headers["X-Total-Count"] = str(result.total_count)
    response.headers["X-Page"] = str(result.page)
    response.headers["X-Page-Size"] = str(result.page_size)
    response.headers["X-Total-Pages"] = str(result.total_pages)

    return result.items


@router.get(
    "/types",
    response_model=List[LookupResponse],
    summary="List property types"
)
async def list_property_types(
    lookup_service: LookupService = Depends(get_lookup_service)
) -> List[LookupResponse]:
    return await lookup_service.list_property_types()


@router.get(
    "/{property_id}",
    response_model=PropertyDetail,
    summary="Get property details",
    responses=get_crud_error_responses()
)
async def get_property(
    property_id: int = Path(..., ge=1, description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetail:
    return await property_service.get_property(property_id)


@router.post(
    "",
    response_model=PropertyDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a property listing owned by the authenticated user.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetail:
    """
    Create a new property listing.

    Args:
        property_data: Property creation data
        current_user: Current authenticated user
        property_service: Property service instance

    Returns:
        Created property with details
    """
    return await property_service.create_property(property_data, current_user)


@router.put(
    "/{property_id}",
    response_model=PropertyDetail,
    summary="Update property",
    description="Update the given fields of a property. Only the owner may update it.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: int = Path(..., ge=1, description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetail:
    return await property_service.update_property(property_id, property_data, current_user)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a property with its images and feature links. Only the owner may delete it.",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: int = Path(..., ge=1, description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.delete_property(property_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{property_id}/images",
    response_model=PropertyImageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload property image",
    description="Attach an image to a property. A primary image replaces the previous primary.",
    responses=get_crud_error_responses()
)
async def upload_property_image(
    property_id: int = Path(..., ge=1, description="Property ID"),
    file: UploadFile = File(..., description="JPEG, PNG or WebP image"),
    caption: Optional[str] = Form(None, max_length=255),
    is_primary: bool = Form(False, alias="isPrimary"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service),
    image_service: ImageService = Depends(get_image_service)
) -> PropertyImageResponse:
    """
    Upload an image for a property the current user owns.

    Raises:
        PropertyNotFoundError: If property doesn't exist
        PropertyOwnershipError: If user doesn't own the property
        FileUploadError: If the file is not an acceptable image
    """
    property_obj = await property_service.get_owned_property(property_id, current_user)
    return await image_service.upload_image(property_obj, file, caption=caption, is_primary=is_primary)
