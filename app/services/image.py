"""
Image service for validating and storing property image uploads.
All files in a batch are validated before any of them is written.
"""

import io
import uuid
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from PIL import Image, UnidentifiedImageError
from fastapi import UploadFile

from app.config import settings
from app.utils.file_utils import FileStorage
from app.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
    TooManyFilesError
)

logger = logging.getLogger(__name__)

# Accepted extensions and Pillow format names per MIME type
SUPPORTED_FORMATS = {
    "image/jpeg": {"extensions": {".jpg", ".jpeg"}, "formats": {"JPEG", "MPO"}},
    "image/png": {"extensions": {".png"}, "formats": {"PNG"}},
    "image/webp": {"extensions": {".webp"}, "formats": {"WEBP"}},
    "image/gif": {"extensions": {".gif"}, "formats": {"GIF"}},
}


class ImageService:
    """Service for validating uploaded images and writing them to storage."""

    def __init__(self, storage: Optional[FileStorage] = None):
        self.storage = storage or FileStorage()
        self.max_file_size = settings.max_file_size
        self.max_images = settings.max_images_per_property
        self.allowed_types = [t for t in settings.allowed_file_types if t in SUPPORTED_FORMATS]

    async def read_and_validate(self, file: UploadFile) -> Tuple[bytes, str]:
        """
        Read an uploaded file and check that it is an allowed, decodable image.

        Args:
            file: Uploaded file object

        Returns:
            Tuple of (content, extension)

        Raises:
            FileUploadError: If the file is missing, empty or not a valid image
            UnsupportedFileTypeError: If the MIME type or extension is not allowed
            FileSizeExceededError: If the file is larger than the limit
        """
        if not file.filename:
            raise FileUploadError("Filename is required")

        content_type = (file.content_type or "").lower()
        if content_type not in self.allowed_types:
            raise UnsupportedFileTypeError(content_type or "unknown", self.allowed_types)

        extension = Path(file.filename).suffix.lower()
        if extension not in SUPPORTED_FORMATS[content_type]["extensions"]:
            allowed = sorted(SUPPORTED_FORMATS[content_type]["extensions"])
            raise UnsupportedFileTypeError(extension or "none", allowed)

        await file.seek(0)
        content = await file.read()

        if not content:
            raise FileUploadError(f"{file.filename} is empty")
        if len(content) > self.max_file_size:
            raise FileSizeExceededError(len(content), self.max_file_size)

        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                image_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"{file.filename} is not a valid image: {e}")

        if image_format not in SUPPORTED_FORMATS[content_type]["formats"]:
            raise FileUploadError(f"{file.filename} content does not match declared type {content_type}")

        return content, extension

    async def store_images(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile],
        existing_count: int = 0
    ) -> List[Dict[str, str]]:
        """
        Validate a batch of uploads and write them to storage.

        Args:
            property_id: Property the images belong to
            files: Uploaded files
            existing_count: Images the property keeps alongside the new ones

        Returns:
            Image references {"url", "public_id"} in upload order

        Raises:
            FileUploadError: If no files were sent or any file is invalid
            TooManyFilesError: If the property would exceed the image limit
        """
        if not files:
            raise FileUploadError("At least one image is required")

        total = existing_count + len(files)
        if total > self.max_images:
            raise TooManyFilesError(total, self.max_images)

        validated = [await self.read_and_validate(file) for file in files]

        stored: List[Dict[str, str]] = []
        try:
            for content, extension in validated:
                stored.append(await self.storage.save(property_id, content, extension))
        except OSError as e:
            self.storage.delete_many(image["public_id"] for image in stored)
            logger.error(f"Failed to store images for property {property_id}: {e}", exc_info=True)
            raise FileUploadError("Could not store uploaded images")

        logger.info(f"Stored {len(stored)} images for property {property_id}")
        return stored

    def remove_images(self, images: List[Dict[str, str]]) -> int:
        """Delete the files behind a list of image references."""
        return self.storage.delete_many(image["public_id"] for image in images if image.get("public_id"))

    def remove_property_images(self, property_id: uuid.UUID, images: List[Dict[str, str]]) -> None:
        """Delete every stored file of a property."""
        self.remove_images(images)
        self.storage.delete_property_dir(property_id)
