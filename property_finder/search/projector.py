"""
Projection of property snapshots into API view models.
"""

from property_finder.schemas.property import (
    FeatureResponse,
    OwnerProfile,
    PropertyDetail,
    PropertyImageResponse,
    PropertySummary,
)
from property_finder.search.snapshots import ImageSnapshot, PropertySnapshot
from typing import Optional, Sequence


def primary_image_url(images: Sequence[ImageSnapshot]) -> Optional[str]:
    """
    URL of the image to show first for a property.

    The first image flagged primary wins; without a flagged image the first
    image is used, and a property without images has none.
    """
    for image in images:
        if image.is_primary:
            return image.image_url
    return images[0].image_url if images else None


def _summary_fields(snapshot: PropertySnapshot) -> dict:
    return {
        "id": snapshot.id,
        "title": snapshot.title,
        "description": snapshot.description,
        "property_type": snapshot.property_type.name,
        "location": snapshot.location.name,
        "address": snapshot.address,
        "price": snapshot.price,
        "size": snapshot.size,
        "bedrooms": snapshot.bedrooms,
        "bathrooms": snapshot.bathrooms,
        "listing_type": snapshot.listing_type,
        "status": snapshot.status,
        "owner_name": snapshot.owner.display_name,
        "primary_image_url": primary_image_url(snapshot.images),
        "created_at": snapshot.created_at,
    }


def to_summary(snapshot: PropertySnapshot) -> PropertySummary:
    """Listing view of a property."""
    return PropertySummary(**_summary_fields(snapshot))


def to_detail(snapshot: PropertySnapshot) -> PropertyDetail:
    """Full view of a property with owner profile, images and features."""
    owner = snapshot.owner
    return PropertyDetail(
        **_summary_fields(snapshot),
        property_type_id=snapshot.property_type_id,
        location_id=snapshot.location_id,
        year_built=snapshot.year_built,
        owner=OwnerProfile(
            id=owner.id,
            username=owner.username,
            email=owner.email,
            first_name=owner.first_name,
            last_name=owner.last_name,
            display_name=owner.display_name,
            phone_number=owner.phone_number,
            profile_picture_url=owner.profile_picture_url,
            user_type=owner.user_type,
        ),
        images=[PropertyImageResponse.model_validate(image) for image in snapshot.images],
        features=[FeatureResponse.model_validate(feature) for feature in snapshot.features],
        updated_at=snapshot.updated_at,
    )
