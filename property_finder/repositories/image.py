"""
Image repository for property image records.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from property_finder.repositories.base import BaseRepository
from property_finder.models.image import PropertyImage
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)


class ImageRepository(BaseRepository[PropertyImage]):
    """Repository for images attached to properties."""

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyImage, db)

    async def create_image(self, image_data: Dict[str, Any]) -> PropertyImage:
        """
        Store a new image record.
        A primary image takes the primary flag away from the property's other
        images in the same transaction.

        Args:
            image_data: Column values for the new image

        Returns:
            Created image instance
        """
        try:
            if image_data.get("is_primary"):
                await self.db.execute(
                    update(PropertyImage)
                    .where(PropertyImage.property_id == image_data["property_id"])
                    .values(is_primary=False)
                )

            image = PropertyImage(**image_data)
            self.db.add(image)
            await self.db.commit()
            await self.db.refresh(image)

            logger.info(f"Stored image {image.id} for property {image.property_id}")
            return image
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to store image for property {image_data.get('property_id')}: {e}")
            raise
