"""
MongoDB access for the InventiSync API.

`db` is None when DATABASE_URL is not configured; routes then fail with a
500 through get_database() instead of at import time.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

from errors import InvalidIdentifier, UpstreamFailure
from settings import get_settings

settings = get_settings()

client: Optional[MongoClient] = MongoClient(settings.DATABASE_URL) if settings.DATABASE_URL else None
db: Optional[Database] = client[settings.DATABASE_NAME] if client is not None else None


def get_database() -> Database:
    if db is None:
        raise UpstreamFailure("Database not configured")
    return db


def to_object_id(value: Union[str, ObjectId]) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except Exception:
        raise InvalidIdentifier(f"Invalid id: {value}")


def serialize(document: Optional[dict]) -> Optional[dict]:
    """Convert ObjectId values at the top level of a document to strings."""
    if document is None:
        return None
    return {k: str(v) if isinstance(v, ObjectId) else v for k, v in document.items()}


def create_document(collection_name: str, data: Union[BaseModel, dict], database: Database = None) -> str:
    """Insert a document stamped with created_at/updated_at and return its id as a string."""
    database = database if database is not None else get_database()
    if isinstance(data, BaseModel):
        payload = data.model_dump(by_alias=True, exclude_none=True)
    else:
        payload = dict(data)
    now = datetime.now(timezone.utc)
    payload.setdefault("created_at", now)
    payload["updated_at"] = now
    result = database[collection_name].insert_one(payload)
    return str(result.inserted_id)


def get_documents(
    collection_name: str,
    filter_dict: Dict[str, Any] = None,
    limit: int = None,
    sort: List[tuple] = None,
    projection: Dict[str, int] = None,
    database: Database = None,
) -> List[dict]:
    database = database if database is not None else get_database()
    cursor = database[collection_name].find(filter_dict or {}, projection)
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return [serialize(doc) for doc in cursor]
