"""
Image service for handling property image uploads and storage.
Validates uploads with Pillow and writes them to disk with aiofiles.
"""

import io
import uuid
from pathlib import Path
from typing import Optional
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from property_finder.config import get_settings
from property_finder.models.property import Property
from property_finder.repositories.image import ImageRepository
from property_finder.schemas.property import PropertyImageResponse
from property_finder.utils.exceptions import FileUploadError
import logging

logger = logging.getLogger(__name__)

# Pillow format names accepted for each declared content type
EXPECTED_FORMATS = {
    "image/jpeg": {"JPEG"},
    "image/png": {"PNG"},
    "image/webp": {"WEBP"},
}

EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "WEBP": ".webp",
}


class ImageService:
    """Service for managing property image uploads and storage."""

    def __init__(self, db_session: AsyncSession):
        settings = get_settings()
        self.db_session = db_session
        self.repository = ImageRepository(db_session)
        self.upload_dir = Path(settings.upload_dir)
        self.url_prefix = settings.upload_url_prefix.rstrip("/")
        self.max_file_size = settings.max_file_size
        self.allowed_types = settings.allowed_file_types

    def validate_image_content(self, content: bytes, content_type: Optional[str]) -> str:
        """
        Validate uploaded image bytes.

        Args:
            content: Raw file content
            content_type: Declared MIME type of the upload

        Returns:
            Pillow format name of the image

        Raises:
            FileUploadError: If the file is empty, too large, of a disallowed
                type or not a readable image of the declared type
        """
        if not content:
            raise FileUploadError("File is empty")

        if len(content) > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise FileUploadError(f"File size exceeds maximum allowed size of {max_mb:.1f}MB")

        if content_type not in self.allowed_types:
            raise FileUploadError(
                f"File type '{content_type}' not allowed. Allowed types: {', '.join(self.allowed_types)}"
            )

        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                image_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file: {e}")

        if image_format not in EXPECTED_FORMATS.get(content_type, set()):
            raise FileUploadError(f"File content doesn't match declared type {content_type}")

        return image_format

    def _generate_file_path(self, property_id: int, image_format: str) -> Path:
        """
        Generate unique file path for an uploaded image.

        Args:
            property_id: ID of the property
            image_format: Pillow format name of the image

        Returns:
            Path object for the file
        """
        property_dir = self.upload_dir / "properties" / str(property_id)
        property_dir.mkdir(parents=True, exist_ok=True)
        return property_dir / f"{uuid.uuid4().hex}{EXTENSIONS[image_format]}"

    async def save_image_file(self, content: bytes, file_path: Path) -> None:
        """
        Save uploaded content to disk.

        Raises:
            FileUploadError: If file save fails
        """
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            logger.error(f"Failed to write image file {file_path}: {e}")
            raise FileUploadError(f"Failed to save image file: {e}")

    async def upload_image(
        self,
        property_obj: Property,
        file: UploadFile,
        caption: Optional[str] = None,
        is_primary: bool = False
    ) -> PropertyImageResponse:
        """
        Upload and store a property image.

        Args:
            property_obj: Property the image belongs to
            file: Uploaded image file
            caption: Optional caption
            is_primary: Whether this image becomes the primary image

        Returns:
            Created property image response

        Raises:
            FileUploadError: If validation or storage fails
        """
        content = await file.read()
        image_format = self.validate_image_content(content, file.content_type)

        file_path = self._generate_file_path(property_obj.id, image_format)
        await self.save_image_file(content, file_path)

        relative_path = file_path.relative_to(self.upload_dir).as_posix()
        try:
            image = await self.repository.create_image({
                "property_id": property_obj.id,
                "image_url": f"{self.url_prefix}/{relative_path}",
                "caption": caption,
                "is_primary": is_primary,
            })
        except Exception:
            # Keep disk and database consistent
            if file_path.exists():
                file_path.unlink()
            raise

        logger.info(f"Uploaded image {image.id} for property {property_obj.id} ({len(content)} bytes)")
        return PropertyImageResponse.model_validate(image)
