"""
Database helpers

MongoDB access for the storefront. Each entity lives in a collection named
after its lowercased schema class (User -> "user"). Documents use integer ids
handed out by the "counter" collection and are never physically removed:
deleting a document stamps ``deleted_at``.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

db = None
if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]

ACTIVE = {"deleted_at": None}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_db():
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return db


def next_id(collection_name: str) -> int:
    counter = get_db()["counter"].find_one_and_update(
        {"_id": collection_name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return counter["seq"]


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> Dict[str, Any]:
    """Insert a document and return it as stored, ``_id`` included."""
    if isinstance(data, BaseModel):
        data = data.model_dump()
    now = utcnow()
    doc = {**data, "_id": next_id(collection_name), "created_at": now, "updated_at": now, "deleted_at": None}
    get_db()[collection_name].insert_one(doc)
    return doc


def get_documents(
    collection_name: str,
    filter_dict: Optional[dict] = None,
    skip: int = 0,
    limit: int = 0,
    sort: Optional[List[tuple]] = None,
) -> List[Dict[str, Any]]:
    """Active documents matching ``filter_dict``."""
    cursor = get_db()[collection_name].find({**(filter_dict or {}), **ACTIVE})
    if sort:
        cursor = cursor.sort(sort)
    if skip:
        cursor = cursor.skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def count_documents(collection_name: str, filter_dict: Optional[dict] = None) -> int:
    return get_db()[collection_name].count_documents({**(filter_dict or {}), **ACTIVE})


def find_active(collection_name: str, filter_dict: dict) -> Optional[Dict[str, Any]]:
    return get_db()[collection_name].find_one({**filter_dict, **ACTIVE})


def require_active(collection_name: str, filter_dict: dict, detail: str) -> Dict[str, Any]:
    doc = find_active(collection_name, filter_dict)
    if not doc:
        logger.warning("%s lookup missed: %s", collection_name, filter_dict)
        raise HTTPException(status_code=404, detail=detail)
    return doc


def update_active(collection_name: str, filter_dict: dict, changes: dict) -> Optional[Dict[str, Any]]:
    """Apply ``$set`` to one active document and return it after the update."""
    return get_db()[collection_name].find_one_and_update(
        {**filter_dict, **ACTIVE},
        {"$set": {**changes, "updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )


def soft_delete(collection_name: str, filter_dict: dict) -> Optional[Dict[str, Any]]:
    now = utcnow()
    return get_db()[collection_name].find_one_and_update(
        {**filter_dict, **ACTIVE},
        {"$set": {"deleted_at": now, "updated_at": now}},
        return_document=ReturnDocument.AFTER,
    )


def serialize_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    if not doc:
        return doc
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = doc.pop("_id")
    doc.pop("password_hash", None)
    # Convert datetime to isoformat
    for k, v in list(doc.items()):
        if isinstance(v, datetime):
            doc[k] = v.isoformat()
    return doc
