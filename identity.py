"""
Shared account operations

Accounts and sellers are stored in separate collections with their own email
namespaces but follow the same create/edit/delete/login rules; the routers in
accounts.py and sellers.py call these with their collection name.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from pydantic import BaseModel

from database import (
    create_document,
    find_active,
    require_active,
    serialize_doc,
    soft_delete,
    update_active,
)
from security import hash_password, verify_password

logger = logging.getLogger(__name__)


def ensure_email_free(collection: str, email: str, label: str, exclude_id: Optional[int] = None) -> None:
    existing = find_active(collection, {"email": email})
    if existing and existing["_id"] != exclude_id:
        logger.warning("Duplicate %s email rejected", collection)
        raise HTTPException(status_code=400, detail=f"{label} with this email already exists.")


def register(collection: str, record: BaseModel, label: str) -> Dict[str, Any]:
    ensure_email_free(collection, record.email, label)
    doc = create_document(collection, record)
    logger.info("Created %s %s", collection, doc["_id"])
    return serialize_doc(doc)


def edit(collection: str, record_id: int, changes: dict, label: str, not_found: str) -> Dict[str, Any]:
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update.")
    require_active(collection, {"_id": record_id}, not_found)
    if "email" in changes:
        ensure_email_free(collection, changes["email"], label, exclude_id=record_id)
    updated = update_active(collection, {"_id": record_id}, changes)
    if not updated:
        raise HTTPException(status_code=404, detail=not_found)
    logger.info("Updated %s %s: %s", collection, record_id, sorted(changes))
    return serialize_doc(updated)


def remove(collection: str, record_id: int, not_found: str) -> Dict[str, Any]:
    deleted = soft_delete(collection, {"_id": record_id})
    if not deleted:
        raise HTTPException(status_code=404, detail=not_found)
    logger.info("Soft deleted %s %s", collection, record_id)
    return serialize_doc(deleted)


def details(collection: str, record_id: int, not_found: str) -> Dict[str, Any]:
    return serialize_doc(require_active(collection, {"_id": record_id}, not_found))


def authenticate(collection: str, email: str, password: str, missing_status: int) -> Dict[str, Any]:
    """Active record for ``email`` whose stored hash matches ``password``.

    ``missing_status`` is the status returned when no active record holds the
    email; accounts answer 404 there while sellers answer 401.
    """
    doc = find_active(collection, {"email": email})
    if not doc:
        logger.warning("Login for unknown %s email", collection)
        detail = "Account not found." if missing_status == 404 else "Invalid email or password."
        raise HTTPException(status_code=missing_status, detail=detail)
    if not verify_password(password, doc.get("password_hash")):
        logger.warning("Login with wrong password for %s %s", collection, doc["_id"])
        raise HTTPException(status_code=401, detail="Invalid email or password.")
    return doc


def reset_password(collection: str, email: str, new_password: str, not_found: str) -> None:
    doc = require_active(collection, {"email": email}, not_found)
    update_active(collection, {"_id": doc["_id"]}, {"password_hash": hash_password(new_password)})
    logger.info("Password reset for %s %s", collection, doc["_id"])
