import asyncio
import logging
from typing import Dict

from fastapi import HTTPException, status
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ...database.db import SERVICES, BANNERS, FAQS, GALLERIES

logger = logging.getLogger(__name__)

# Response key -> collection counted
STAT_COLLECTIONS = {
    "totalServices": SERVICES,
    "totalBanners": BANNERS,
    "totalFaqs": FAQS,
    "totalGalleries": GALLERIES,
}


class DashboardController:
    def __init__(self, db: Database):
        self.db = db

    async def get_stats(self) -> Dict[str, int]:
        """Document counts per collection.

        Each count is a separate query, so the numbers are not a consistent
        snapshot of the database.
        """
        stats = {}
        try:
            for key, collection in STAT_COLLECTIONS.items():
                stats[key] = await asyncio.to_thread(self.db[collection].count_documents, {})
        except PyMongoError as e:
            logger.error(f"❌ Failed to count documents: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
        return stats
