import asyncio
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import BSONError
from fastapi import HTTPException, status
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .schema import ResourceConfig
from ...media.client import MediaStoreClient, UploadedImage
from ...utils.helperFunctions import is_valid_object_id, utcnow
from ...utils.response import format_delete_result, format_insert_result

logger = logging.getLogger(__name__)


class ResourceController:
    """CRUD operations over one content collection"""

    def __init__(self, config: ResourceConfig, collection: Collection,
                 media: Optional[MediaStoreClient] = None):
        self.config = config
        self.collection = collection
        self.media = media

    def _store_fault(self, action: str, error: PyMongoError) -> HTTPException:
        logger.error(f"❌ Failed to {action} {self.config.collection}: {error}")
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))

    def _object_id(self, item_id: str) -> ObjectId:
        if not is_valid_object_id(item_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid {self.config.label.lower()} ID",
            )
        return ObjectId(item_id)

    async def create(self, fields: Dict[str, Any], image: Optional[UploadedImage] = None) -> Dict[str, Any]:
        """Insert a document built from the submitted fields.

        The image is already on the media host by the time this runs; if the
        insert fails it is destroyed again so it doesn't linger unreferenced.
        """
        item = dict(fields)
        if image is not None:
            item["image"] = image.url
        item["createdAt"] = utcnow()

        try:
            result = await asyncio.to_thread(self.collection.insert_one, item)
        except (BSONError, OverflowError) as e:
            # The driver refused to encode the document; nothing reached the store
            if image is not None:
                await self._discard_image(image)
            logger.warning(f"⚠️ Rejected {self.config.collection} document: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except PyMongoError as e:
            if image is not None:
                await self._discard_image(image)
            raise self._store_fault("insert into", e)
        except Exception:
            if image is not None:
                await self._discard_image(image)
            raise

        return format_insert_result(result)

    async def _discard_image(self, image: UploadedImage):
        try:
            await self.media.destroy(image.public_id)
        except Exception:
            # Compensation is best effort; the original store error is what the client sees
            logger.exception(f"Failed to remove orphaned image {image.public_id}")

    async def list(self) -> List[Dict[str, Any]]:
        try:
            return await asyncio.to_thread(lambda: list(self.collection.find({})))
        except PyMongoError as e:
            raise self._store_fault("list", e)

    async def get(self, item_id: str) -> Dict[str, Any]:
        object_id = self._object_id(item_id)
        try:
            document = await asyncio.to_thread(self.collection.find_one, {"_id": object_id})
        except PyMongoError as e:
            raise self._store_fault("read", e)

        if not document:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.config.label} not found",
            )
        return document

    async def delete(self, item_id: str) -> Dict[str, Any]:
        """Delete by id; reports deletedCount 0 when nothing matched"""
        object_id = self._object_id(item_id)
        try:
            result = await asyncio.to_thread(self.collection.delete_one, {"_id": object_id})
        except PyMongoError as e:
            raise self._store_fault("delete from", e)
        return format_delete_result(result)
