"""
MongoDB access helpers

`db` is None when no database is configured; routes report that through
/test instead of failing at import time.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient

import config

logger = logging.getLogger(__name__)

_client = None
db = None

if config.DATABASE_URL and config.DATABASE_NAME:
    _client = MongoClient(config.DATABASE_URL)
    db = _client[config.DATABASE_NAME]


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a hex id, returning None for anything that is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    if db is None:
        raise RuntimeError("Database not available. Check DATABASE_URL and DATABASE_NAME.")

    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)

    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now

    result = db[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[dict] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    if db is None:
        raise RuntimeError("Database not available. Check DATABASE_URL and DATABASE_NAME.")

    cursor = db[collection_name].find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def update_document(collection_name: str, doc_id: ObjectId, changes: dict) -> Optional[Dict[str, Any]]:
    """Apply a $set of `changes` and return the fresh document (None if missing)."""
    if changes:
        changes = {**changes, "updated_at": datetime.now(timezone.utc)}
        db[collection_name].update_one({"_id": doc_id}, {"$set": changes})
    return db[collection_name].find_one({"_id": doc_id})


def ensure_indexes():
    if db is None:
        return
    db["user"].create_index([("email", ASCENDING)], unique=True)
    db["content"].create_index([("section", ASCENDING)], unique=True)
    logger.info("Indexes ensured on %s", db.name)
