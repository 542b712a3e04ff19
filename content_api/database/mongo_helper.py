# content_api/database/mongo_helper.py
"""
MongoDB connection helpers with retry logic
"""
import logging
import time
from typing import Optional
from pymongo import MongoClient
from pymongo.errors import ServerSelectionTimeoutError, OperationFailure, PyMongoError

logger = logging.getLogger(__name__)


def create_mongo_client(mongo_uri: str, max_retries: int = 3, retry_delay: int = 2) -> Optional[MongoClient]:
    """
    Create MongoDB client and verify it with a ping, retrying with exponential backoff

    Args:
        mongo_uri: MongoDB connection URI
        max_retries: Maximum number of connection attempts
        retry_delay: Initial delay between retries

    Returns:
        MongoClient instance or None if every attempt fails
    """
    connection_params = {
        'serverSelectionTimeoutMS': 30000,
        'connectTimeoutMS': 30000,
        'maxPoolSize': 10,
        'retryWrites': True,
        'appName': 'content-api',
    }

    for attempt in range(max_retries):
        try:
            logger.info(f"🔄 MongoDB connection attempt {attempt + 1}/{max_retries}")
            client = MongoClient(mongo_uri, **connection_params)
            client.admin.command('ping')
            logger.info(f"✅ MongoDB connection successful on attempt {attempt + 1}")
            return client

        except ServerSelectionTimeoutError as e:
            logger.warning(f"⚠️ MongoDB server selection timeout (attempt {attempt + 1}): {str(e)[:200]}...")

        except OperationFailure as e:
            logger.error(f"❌ MongoDB authentication/operation failed (attempt {attempt + 1}): {str(e)[:200]}...")

        except PyMongoError as e:
            logger.error(f"❌ MongoDB connection failed (attempt {attempt + 1}): {str(e)[:200]}...")

        if attempt < max_retries - 1:
            wait_time = retry_delay * (2 ** attempt)
            logger.info(f"🔄 Retrying in {wait_time} seconds...")
            time.sleep(wait_time)
        else:
            logger.error("❌ All MongoDB connection attempts failed")

    return None


def test_mongo_connection(client: MongoClient, db_name: str) -> bool:
    """Check that the server answers and the database is reachable"""
    try:
        client.admin.command('ping')
        client[db_name].list_collection_names()
        logger.info(f"✅ MongoDB connection and database '{db_name}' access verified")
        return True

    except PyMongoError as e:
        logger.error(f"❌ MongoDB connection test failed: {str(e)[:200]}...")
        return False
