# Content API database package
from .db import get_database, DatabaseConnection

__all__ = ["get_database", "DatabaseConnection"]
