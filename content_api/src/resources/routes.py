# content_api/src/resources/routes.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pymongo.database import Database
from starlette.datastructures import UploadFile

from .controller import ResourceController
from .schema import ResourceConfig
from ...config import ContentAPISettings
from ...database.db import get_database
from ...media.client import MediaStoreClient, UploadedImage, get_media_client
from ...middlewares.upload import ImageUpload
from ...utils.response import send_response


async def read_submitted_fields(request: Request) -> Dict[str, Any]:
    """Collect the client's fields from a JSON body or a (multipart) form"""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError both land here
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
        if not isinstance(body, dict):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Expected a JSON object")
        return body

    form = await request.form()
    return {key: value for key, value in form.items() if not isinstance(value, UploadFile)}


def build_resource_router(config: ResourceConfig, settings: ContentAPISettings) -> APIRouter:
    """Create/list/delete (and optionally get) routes for one collection"""
    router = APIRouter(prefix=config.prefix, tags=[config.label])

    def get_controller(
        db: Database = Depends(get_database),
        media: MediaStoreClient = Depends(get_media_client),
    ) -> ResourceController:
        return ResourceController(config, db[config.collection], media)

    if config.has_image:
        upload_guard = ImageUpload.from_settings(settings)

        @router.post("")
        async def create_item(
            request: Request,
            image: UploadedImage = Depends(upload_guard),
            controller: ResourceController = Depends(get_controller),
        ):
            fields = await read_submitted_fields(request)
            result = await controller.create(fields, image)
            return send_response(status.HTTP_201_CREATED, result)
    else:
        @router.post("")
        async def create_item(
            request: Request,
            controller: ResourceController = Depends(get_controller),
        ):
            fields = await read_submitted_fields(request)
            result = await controller.create(fields)
            return send_response(status.HTTP_201_CREATED, result)

    @router.get("")
    async def list_items(controller: ResourceController = Depends(get_controller)):
        return send_response(status.HTTP_200_OK, await controller.list())

    if config.allow_get_by_id:
        @router.get("/{item_id}")
        async def get_item(item_id: str, controller: ResourceController = Depends(get_controller)):
            return send_response(status.HTTP_200_OK, await controller.get(item_id))

    @router.delete("/{item_id}")
    async def delete_item(item_id: str, controller: ResourceController = Depends(get_controller)):
        return send_response(status.HTTP_200_OK, await controller.delete(item_id))

    return router
