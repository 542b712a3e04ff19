# content_api/main.py
"""
Content API
FastAPI app factory, lifespan wiring and exception handlers
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ContentAPISettings, DEV_JWT_SECRET, get_settings
from .database.db import DatabaseConnection
from .media.client import MediaStoreClient
from .router_config import setup_routers
from .server import log_unhandled_async_error
from .utils.helperFunctions import ensure_default_admin
from .utils.response import send_response

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[ContentAPISettings] = None,
    database: Optional[Database] = None,
    media_client: Optional[MediaStoreClient] = None,
) -> FastAPI:
    """Build the application.

    The database handle and media client are created during startup unless
    they are passed in.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        asyncio.get_running_loop().set_exception_handler(log_unhandled_async_error)

        if settings.JWT_SECRET_KEY == DEV_JWT_SECRET:
            logger.warning("⚠️ JWT_SECRET_KEY is the development default; set it in the environment")

        connection = None
        if app.state.db is None:
            connection = await asyncio.to_thread(DatabaseConnection, settings)
            app.state.db = connection.db
        if app.state.media_client is None:
            app.state.media_client = MediaStoreClient.from_settings(settings)

        await asyncio.to_thread(ensure_default_admin, app.state.db, settings)
        logger.info(f"🚀 {settings.SERVICE_NAME} {settings.SERVICE_VERSION} ready")

        yield

        if connection is not None:
            connection.close_connection()
        logger.info(f"Shutting down {settings.SERVICE_NAME}...")

    app = FastAPI(
        title="Content API",
        description="Content management backend for the business website",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database
    app.state.media_client = media_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return send_response(exc.status_code, {"message": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return send_response(400, {"message": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return send_response(500, {"message": "Internal server error"})

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Server is running successfully!"

    return setup_routers(app, settings)


app = create_app()
