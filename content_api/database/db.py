# content_api/database/db.py
import logging
from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError
from .mongo_helper import create_mongo_client, test_mongo_connection
from ..config import ContentAPISettings

logger = logging.getLogger(__name__)

SERVICES = "services"
BANNERS = "banners"
FAQS = "faqs"
GALLERIES = "galleries"
USERS = "users"


class DatabaseConnection:
    """Owns the MongoClient for the lifetime of the application"""

    def __init__(self, settings: ContentAPISettings):
        logger.info("🔄 Initializing MongoDB connection...")
        self.client: MongoClient = create_mongo_client(
            settings.MONGODB_URI,
            max_retries=settings.MONGO_CONNECT_RETRIES,
            retry_delay=settings.MONGO_RETRY_DELAY,
        )
        if self.client is None:
            logger.error("❌ Failed to create MongoDB client after multiple attempts")
            raise ConnectionError("Unable to connect to MongoDB")

        db_name = self._resolve_database_name(settings)
        if not test_mongo_connection(self.client, db_name):
            logger.error(f"❌ Failed to access database '{db_name}'")
            raise ConnectionError(f"Unable to access database '{db_name}'")

        self._db = self.client[db_name]
        logger.info(f"✅ MongoDB connection established for database '{db_name}'")

        self._create_indexes()

    def _resolve_database_name(self, settings: ContentAPISettings) -> str:
        """Prefer the database named in the URI, fall back to DATABASE_NAME"""
        try:
            return self.client.get_default_database().name
        except ConfigurationError:
            return settings.DATABASE_NAME

    def _create_indexes(self):
        # Login looks users up by email
        self._db[USERS].create_index("email")

    def close_connection(self):
        """Close MongoDB connection"""
        if self.client is not None:
            self.client.close()
            logger.info("🔒 MongoDB connection closed")

    @property
    def db(self) -> Database:
        return self._db


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the database handle injected at startup"""
    return request.app.state.db
