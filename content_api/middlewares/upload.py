# content_api/middlewares/upload.py
"""
Single-image upload guard for multipart create routes.

Validates the submitted file, forwards it to the media host and hands the
stored URL and public id to the route handler. Any failure answers the
request before the handler runs.
"""
import logging
from typing import List

import cloudinary.exceptions
from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

from ..config import ContentAPISettings
from ..media.client import MediaStoreClient, UploadedImage, get_media_client

logger = logging.getLogger(__name__)

MISSING_FILE_MESSAGE = "Please upload an image"
FILE_TOO_LARGE_MESSAGE = "File too large. Maximum 5MB allowed."
UPLOAD_FAILED_MESSAGE = "Error uploading file"


class ImageUpload:
    """Dependency that turns the `image` form field into an UploadedImage"""

    def __init__(self, field_name: str, max_bytes: int, allowed_content_types: List[str],
                 allowed_formats: List[str]):
        self.field_name = field_name
        self.max_bytes = max_bytes
        self.allowed_content_types = allowed_content_types
        self.allowed_formats = allowed_formats

    @classmethod
    def from_settings(cls, settings: ContentAPISettings) -> "ImageUpload":
        return cls(
            field_name=settings.UPLOAD_FIELD_NAME,
            max_bytes=settings.UPLOAD_MAX_BYTES,
            allowed_content_types=settings.allowed_content_types,
            allowed_formats=settings.allowed_formats,
        )

    async def __call__(
        self,
        request: Request,
        media: MediaStoreClient = Depends(get_media_client),
    ) -> UploadedImage:
        form = await request.form()
        upload = form.get(self.field_name)
        if not isinstance(upload, UploadFile) or not upload.filename:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_FILE_MESSAGE)

        # Read one byte past the cap so oversized files are caught without buffering all of them
        data = await upload.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=FILE_TOO_LARGE_MESSAGE)

        if upload.content_type not in self.allowed_content_types:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid file type. Allowed types: {', '.join(self.allowed_formats)}",
            )

        try:
            return await media.upload(data, filename=upload.filename)
        except cloudinary.exceptions.Error as e:
            logger.warning(f"⚠️ Media host rejected upload '{upload.filename}': {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except Exception:
            logger.exception("Upload error")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UPLOAD_FAILED_MESSAGE)

