import logging
from typing import Optional

from fastapi import APIRouter, Header, Query
from pydantic import BaseModel, EmailStr, Field

import cache
import identity
from database import utcnow
from envelope import SUCCESS, json_response, raw_response
from schemas import User
from security import bearer_token, decode_token, hash_password, issue_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["account"])

COLLECTION = "user"
LABEL = "An account"
NOT_FOUND = "Account not found."


class AccountIn(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    password: str = Field(..., min_length=6)


class AccountEdit(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = None


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class ResetPasswordIn(BaseModel):
    email: EmailStr
    new_password: str = Field(..., min_length=6)


@router.post("/add")
def add_account(payload: AccountIn):
    user = User(
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone_number=payload.phone_number,
        password_hash=hash_password(payload.password),
    )
    account = identity.register(COLLECTION, user, LABEL)
    return json_response(SUCCESS, "Account created successfully.", data=account)


@router.post("/edit")
def edit_account(payload: AccountEdit, id: int = Query(..., ge=1)):
    changes = payload.model_dump(exclude_none=True)
    account = identity.edit(COLLECTION, id, changes, LABEL, NOT_FOUND)
    return json_response(SUCCESS, "Account updated successfully.", data=account)


@router.delete("/delete")
def delete_account(id: int = Query(..., ge=1)):
    account = identity.remove(COLLECTION, id, NOT_FOUND)
    return json_response(SUCCESS, "Account deleted successfully.", data=account)


@router.get("/details")
def account_details(id: int = Query(..., ge=1)):
    account = identity.details(COLLECTION, id, NOT_FOUND)
    return json_response(SUCCESS, "Account details fetched successfully.", data=account)


@router.post("/login")
def login(payload: LoginIn):
    account = identity.authenticate(COLLECTION, payload.email, payload.password, missing_status=404)
    token = issue_token(account["_id"], account["email"])
    cache.set_data(
        cache.session_key(account["_id"]),
        {"id": account["_id"], "email": account["email"], "token": token, "login_at": utcnow().isoformat()},
        ttl=cache.SESSION_TTL_SECONDS,
    )
    logger.info("Account %s logged in", account["_id"])
    return raw_response(SUCCESS, {"message": "Login successful.", "token": token})


@router.post("/logout")
def logout(authorization: Optional[str] = Header(default=None)):
    # Tokens stay valid until they expire; only the cached session is dropped.
    token = bearer_token(authorization)
    claims = decode_token(token) if token else None
    if claims and "id" in claims:
        cache.remove_data(cache.session_key(claims["id"]))
        logger.info("Account %s logged out", claims["id"])
    return json_response(SUCCESS, "Logout successful.")


@router.post("/reset-password")
def reset_password(payload: ResetPasswordIn):
    identity.reset_password(COLLECTION, payload.email, payload.new_password, "No account found with this email.")
    return json_response(SUCCESS, "Password reset successfully.")
