# content_api/utils/helperFunctions.py
import logging
from datetime import datetime, timezone
from bson import ObjectId
from pymongo.database import Database

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_object_id(value: str) -> bool:
    """True when value can be turned into a Mongo ObjectId"""
    return ObjectId.is_valid(value)


def serialize_document(doc):
    """Convert MongoDB documents for JSON serialization"""
    if isinstance(doc, dict):
        return {key: serialize_document(value) for key, value in doc.items()}
    elif isinstance(doc, (list, tuple)):
        return [serialize_document(item) for item in doc]
    elif isinstance(doc, ObjectId):
        return str(doc)
    elif isinstance(doc, datetime):
        return doc.isoformat()
    return doc


# -----------------------------------------
# Admin bootstrap helper
# -----------------------------------------

def ensure_default_admin(db: Database, settings) -> bool:
    """Create the default admin account if no user has the admin email.

    Returns True when a user was inserted. Running it again against the same
    database is a no-op, so it is safe to call on every startup.
    """
    # Local import keeps the auth package out of the utils import graph
    from ..src.auth.controller import hash_password

    admin_email = settings.DEFAULT_ADMIN_EMAIL
    if db.users.find_one({"email": admin_email}):
        logger.info("Admin already exists")
        return False

    result = db.users.insert_one({
        "email": admin_email,
        "password": hash_password(settings.DEFAULT_ADMIN_PASSWORD),
        "createdAt": utcnow(),
    })
    logger.info(f"[INIT] Admin seeded successfully: {result.inserted_id}")
    return True
