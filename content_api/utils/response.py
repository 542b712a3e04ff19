from typing import Any, Mapping
from fastapi.responses import JSONResponse
from pymongo.results import InsertOneResult, DeleteResult

from .helperFunctions import serialize_document


def envelope(status_code: int, data: Any) -> dict:
    """Build the {status, result, message} body every API response carries"""
    message = data.get("message") if isinstance(data, Mapping) else None
    return {
        "status": status_code,
        "result": serialize_document(data),
        "message": message,
    }


def send_response(status_code: int, data: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(status_code, data))


def format_insert_result(result: InsertOneResult) -> dict:
    return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}


def format_delete_result(result: DeleteResult) -> dict:
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}
