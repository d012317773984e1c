import logging
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, EmailStr, Field

import identity
from envelope import SUCCESS, json_response, raw_response
from schemas import Seller
from security import hash_password, issue_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/seller/account", tags=["seller"])

COLLECTION = "seller"
LABEL = "A seller"
NOT_FOUND = "Seller not found."


class SellerIn(BaseModel):
    name: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=6)
    company_name: str = Field(..., min_length=1)


class SellerEdit(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = None
    email: Optional[EmailStr] = None
    company_name: Optional[str] = Field(None, min_length=1)


class SellerLoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class SellerResetPasswordIn(BaseModel):
    email: EmailStr
    new_password: str = Field(..., min_length=6)


@router.post("/add")
def add_seller(payload: SellerIn):
    seller = Seller(
        name=payload.name,
        phone_number=payload.phone_number,
        email=payload.email,
        password_hash=hash_password(payload.password),
        company_name=payload.company_name,
    )
    created = identity.register(COLLECTION, seller, LABEL)
    return json_response(SUCCESS, "Seller created successfully.", data=created)


@router.post("/edit")
def edit_seller(payload: SellerEdit, id: int = Query(..., ge=1)):
    changes = payload.model_dump(exclude_none=True)
    seller = identity.edit(COLLECTION, id, changes, LABEL, NOT_FOUND)
    return json_response(SUCCESS, "Seller updated successfully.", data=seller)


@router.delete("/delete")
def delete_seller(id: int = Query(..., ge=1)):
    seller = identity.remove(COLLECTION, id, NOT_FOUND)
    return json_response(SUCCESS, "Seller marked as deleted successfully.", data=seller)


@router.get("/details")
def seller_details(id: int = Query(..., ge=1)):
    seller = identity.details(COLLECTION, id, NOT_FOUND)
    return json_response(SUCCESS, "Seller account details fetched successfully.", data=seller)


@router.post("/login")
def seller_login(payload: SellerLoginIn):
    seller = identity.authenticate(COLLECTION, payload.email, payload.password, missing_status=401)
    token = issue_token(seller["_id"], seller["email"])
    logger.info("Seller %s logged in", seller["_id"])
    return raw_response(SUCCESS, {"message": "Login successful.", "token": token})


@router.post("/logout")
def seller_logout():
    # Stateless: the token expires on its own.
    return json_response(SUCCESS, "Logout successful.")


@router.post("/reset-password")
def seller_reset_password(payload: SellerResetPasswordIn):
    identity.reset_password(COLLECTION, payload.email, payload.new_password, NOT_FOUND)
    return json_response(SUCCESS, "Password reset successfully.")
