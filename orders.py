import logging
from typing import List, Literal

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from database import (
    ACTIVE,
    create_document,
    get_db,
    get_documents,
    require_active,
    serialize_doc,
    utcnow,
)
from envelope import SUCCESS, json_response
from schemas import Order, OrderStatus, ProductLine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["order"])


class CreateOrderIn(BaseModel):
    order_number: str = Field(..., min_length=1)
    total_amount: float = Field(..., gt=0)
    user_id: int = Field(..., ge=1)
    product_details: List[ProductLine] = Field(..., min_length=1)
    status: Literal["pending", "shipped", "delivered"]


class SingleOrderIn(BaseModel):
    user_id: int = Field(..., ge=1)
    order_id: int = Field(..., ge=1)


class OrderStatusIn(BaseModel):
    user_id: int = Field(..., ge=1)
    order_id: int = Field(..., ge=1)
    status: OrderStatus


@router.post("/order/create")
def create_order(payload: CreateOrderIn):
    # Header and lines go into one document, so the insert is atomic.
    doc = create_document("order", Order(**payload.model_dump()))
    logger.info("Created order %s for user %s", doc["_id"], payload.user_id)
    return json_response(SUCCESS, "Order created successfully.", data=serialize_doc(doc))


@router.get("/orders/details")
def get_all_orders(user_id: int = Query(..., ge=1)):
    orders = get_documents("order", {"user_id": user_id}, sort=[("_id", -1)])
    if not orders:
        raise HTTPException(status_code=404, detail="No orders found for this account.")
    return json_response(SUCCESS, "Orders retrieved successfully.", data=[serialize_doc(x) for x in orders])


@router.post("/orders/by/account")
def get_single_order(payload: SingleOrderIn):
    order = require_active(
        "order",
        {"_id": payload.order_id, "user_id": payload.user_id},
        "Order not found for the specified account.",
    )
    return json_response(SUCCESS, "Order retrieved successfully.", data=serialize_doc(order))


@router.post("/orders/status/update")
def update_order_status(payload: OrderStatusIn):
    """Set the status of an order; canceling also soft-deletes it."""
    now = utcnow()
    changes = {"status": payload.status, "updated_at": now}
    if payload.status == "canceled":
        changes["deleted_at"] = now
    result = get_db()["order"].update_many(
        {"_id": payload.order_id, "user_id": payload.user_id, **ACTIVE},
        {"$set": changes},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Order not found or no changes made.")
    logger.info("Order %s status set to %s", payload.order_id, payload.status)
    return json_response(
        SUCCESS,
        "Order status updated successfully.",
        data={"order_id": payload.order_id, "new_status": payload.status},
    )
