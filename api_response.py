"""Response envelope shared by every endpoint: {msg, data, status}."""
from datetime import datetime
from typing import Any

from bson import ObjectId
from fastapi.responses import JSONResponse


def serialize_doc(value: Any) -> Any:
    """Make a Mongo document JSON friendly (ObjectId -> str, datetime -> ISO)."""
    if isinstance(value, dict):
        return {k: serialize_doc(v) for k, v in value.items() if k != "password_hash"}
    if isinstance(value, list):
        return [serialize_doc(v) for v in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def envelope(msg: str, data: Any = None, status: str = "ok") -> dict:
    return {"msg": msg, "data": serialize_doc(data), "status": status}


def ok(msg: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(msg, data))


def error(msg: str, status_code: int, data: Any = None, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(msg, data, "error"), headers=headers)
