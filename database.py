"""
MongoDB access for the portfolio API.

`db` is None when DATABASE_URL / DATABASE_NAME are not configured; callers
treat that as "remote unavailable" and fall back to cached content.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Union

import gridfs
from pydantic import BaseModel
from pymongo import MongoClient

from config import settings

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None
db = None

if settings.database_url and settings.database_name:
    _client = MongoClient(settings.database_url, serverSelectionTimeoutMS=5000)
    db = _client[settings.database_name]
else:
    logger.warning("DATABASE_URL/DATABASE_NAME not set; running without a database")


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    if db is None:
        raise RuntimeError("Database not available. Check DATABASE_URL and DATABASE_NAME.")
    doc = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    now = datetime.now(timezone.utc)
    doc["created_at"] = now
    doc["updated_at"] = now
    result = db[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[dict] = None, limit: Optional[int] = None) -> list:
    if db is None:
        raise RuntimeError("Database not available. Check DATABASE_URL and DATABASE_NAME.")
    cursor = db[collection_name].find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def content_collection():
    if db is None:
        return None
    return db[settings.content_collection]


def files_bucket() -> Optional[gridfs.GridFSBucket]:
    if db is None:
        return None
    return gridfs.GridFSBucket(db, bucket_name=settings.files_bucket)
