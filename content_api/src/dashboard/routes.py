from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from .controller import DashboardController
from ...database.db import get_database
from ...utils.response import send_response

router = APIRouter(prefix="/api", tags=["Dashboard"])


@router.get("/dashboard-stats")
async def dashboard_stats(db: Database = Depends(get_database)):
    """Totals for the admin dashboard cards"""
    stats = await DashboardController(db).get_stats()
    return send_response(status.HTTP_200_OK, stats)
