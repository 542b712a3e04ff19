import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import cloudinary
import cloudinary.uploader
from fastapi import Request

from ..config import ContentAPISettings

logger = logging.getLogger(__name__)


@dataclass
class UploadedImage:
    """A file stored on the media host"""
    url: str
    public_id: str


class MediaStoreClient:
    """Thin async wrapper over the Cloudinary uploader"""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str,
                 folder: str, allowed_formats: List[str], max_dimension: int = 1000):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder = folder
        self.allowed_formats = allowed_formats
        self.max_dimension = max_dimension

    @classmethod
    def from_settings(cls, settings: ContentAPISettings) -> "MediaStoreClient":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
            allowed_formats=settings.allowed_formats,
            max_dimension=settings.UPLOAD_MAX_DIMENSION,
        )

    async def upload(self, data: bytes, filename: Optional[str] = None) -> UploadedImage:
        """Upload raw image bytes and return where they ended up.

        Raises cloudinary.exceptions.Error when the host rejects the file.
        """
        options = {
            "folder": self.folder,
            "resource_type": "image",
            "allowed_formats": self.allowed_formats,
            "transformation": [
                {"width": self.max_dimension, "height": self.max_dimension, "crop": "limit"}
            ],
        }
        if filename:
            options["filename_override"] = filename

        result = await asyncio.to_thread(cloudinary.uploader.upload, data, **options)
        logger.info(f"📤 Uploaded image {result['public_id']}")
        return UploadedImage(url=result["secure_url"], public_id=result["public_id"])

    async def destroy(self, public_id: str) -> dict:
        """Delete a stored file by its public id"""
        result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        logger.info(f"🗑️ Destroyed image {public_id}: {result.get('result')}")
        return result


def get_media_client(request: Request) -> MediaStoreClient:
    """FastAPI dependency returning the media client injected at startup"""
    return request.app.state.media_client
