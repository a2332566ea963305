"""
File storage utilities for uploaded property images.
Files live under the upload root and are addressed by a public_id relative to it.
"""

import shutil
import uuid
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Optional
import aiofiles
import logging

from app.config import settings

logger = logging.getLogger(__name__)


class FileStorage:
    """Local disk storage for images, served read-only under the uploads URL path."""

    def __init__(self, root: Optional[str] = None, url_path: Optional[str] = None):
        self.root = Path(root or settings.upload_dir)
        self.url_path = (url_path or settings.uploads_url_path).rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def new_public_id(self, property_id: uuid.UUID, extension: str) -> str:
        """
        Generate a unique public_id for a property image.

        Args:
            property_id: Property the image belongs to
            extension: File extension including the dot

        Returns:
            Path relative to the upload root, using forward slashes
        """
        return str(PurePosixPath("properties", str(property_id), f"{uuid.uuid4()}{extension.lower()}"))

    def url_for(self, public_id: str) -> str:
        """Public URL the static mount serves the file from."""
        return f"{self.url_path}/{public_id}"

    def path_for(self, public_id: str) -> Path:
        """
        Resolve a public_id to a path inside the upload root.

        Raises:
            ValueError: If the public_id escapes the upload root
        """
        root = self.root.resolve()
        path = (root / public_id).resolve()
        if root not in path.parents:
            raise ValueError(f"Invalid public_id: {public_id}")
        return path

    async def save(self, property_id: uuid.UUID, content: bytes, extension: str) -> Dict[str, str]:
        """
        Write image bytes to disk.

        Args:
            property_id: Property the image belongs to
            content: Raw file content
            extension: File extension including the dot

        Returns:
            Image reference {"url", "public_id"}
        """
        public_id = self.new_public_id(property_id, extension)
        path = self.path_for(public_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(path, "wb") as f:
            await f.write(content)

        logger.debug(f"Stored image {public_id} ({len(content)} bytes)")
        return {"url": self.url_for(public_id), "public_id": public_id}

    def delete(self, public_id: str) -> bool:
        """
        Remove a stored file.

        Returns:
            True if a file was removed
        """
        try:
            path = self.path_for(public_id)
        except ValueError:
            logger.warning(f"Refusing to delete file outside upload root: {public_id}")
            return False

        if not path.is_file():
            return False

        path.unlink()
        logger.debug(f"Deleted image file {public_id}")
        return True

    def delete_many(self, public_ids: Iterable[str]) -> int:
        """Remove several stored files, returning how many were removed."""
        return sum(1 for public_id in public_ids if self.delete(public_id))

    def delete_property_dir(self, property_id: uuid.UUID) -> None:
        """Remove the whole image directory of a property."""
        property_dir = self.root / "properties" / str(property_id)
        if property_dir.is_dir():
            shutil.rmtree(property_dir, ignore_errors=True)
            logger.info(f"Removed image directory for property {property_id}")
