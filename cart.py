"""
Cart endpoints

Each cart line is its own document in the "cart" collection, owned by a user.
Prices always come from the product record, never from the request, and a
line's ``total_amount`` is ``price * quantity`` whenever it is written.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from database import (
    ACTIVE,
    create_document,
    find_active,
    get_db,
    get_documents,
    require_active,
    serialize_doc,
    update_active,
    utcnow,
)
from envelope import SUCCESS, json_response
from schemas import CartItem

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cart"])

CART_ITEM_NOT_FOUND = "Cart item not found."


class AddToCartIn(BaseModel):
    user_id: int = Field(..., ge=1)
    product_id: int = Field(..., ge=1)
    variant: Optional[str] = None
    quantity: int = Field(1, ge=1)


class RemoveFromCartIn(BaseModel):
    cart_id: int = Field(..., ge=1)
    product_id: int = Field(..., ge=1)


class FetchCartIn(BaseModel):
    user_id: int = Field(..., ge=1)
    cart_id: Optional[int] = Field(None, ge=1)


class UpdateCartItemIn(BaseModel):
    cart_id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)


def line_total(price: float, quantity: int) -> float:
    return price * quantity


@router.post("/add/to/cart")
def add_to_cart(payload: AddToCartIn):
    product = require_active("product", {"_id": payload.product_id}, "Product not found.")
    price = float(product["price"])
    item = CartItem(
        user_id=payload.user_id,
        product_id=payload.product_id,
        product_name=product["name"],
        variant=payload.variant,
        brand_name=product.get("brand_name"),
        quantity=payload.quantity,
        price=price,
        total_amount=line_total(price, payload.quantity),
    )
    doc = create_document("cart", item)
    logger.info("User %s added product %s x%s to cart", payload.user_id, payload.product_id, payload.quantity)
    return json_response(SUCCESS, "Product added to cart successfully.", data=serialize_doc(doc))


@router.post("/remove/from/cart")
def remove_from_cart(payload: RemoveFromCartIn):
    item = require_active("cart", {"_id": payload.cart_id, "product_id": payload.product_id}, CART_ITEM_NOT_FOUND)
    amount_to_subtract = line_total(item["price"], item["quantity"])
    now = utcnow()
    # Quantity drops to zero, so the line total loses its whole contribution.
    result = get_db()["cart"].update_one(
        {"_id": item["_id"], **ACTIVE},
        {
            "$set": {
                "quantity": 0,
                "total_amount": item["total_amount"] - amount_to_subtract,
                "deleted_at": now,
                "updated_at": now,
            },
        },
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail=CART_ITEM_NOT_FOUND)
    updated = get_db()["cart"].find_one({"_id": item["_id"]})
    logger.info("Removed cart line %s", item["_id"])
    return json_response(SUCCESS, "Product removed from cart successfully.", data=serialize_doc(updated))


@router.post("/fetch/cart/details")
def fetch_cart_details(payload: FetchCartIn):
    filt = {"user_id": payload.user_id}
    if payload.cart_id is not None:
        filt["_id"] = payload.cart_id
    items = get_documents("cart", filt, sort=[("_id", 1)])
    if not items:
        raise HTTPException(status_code=404, detail="No items found in the cart.")
    return json_response(
        SUCCESS,
        "Cart details fetched successfully.",
        data=[serialize_doc(x) for x in items],
        meta={"cart_total": round(sum(x["total_amount"] for x in items), 2), "count": len(items)},
    )


@router.post("/update/cart/item")
def update_cart_item(payload: UpdateCartItemIn):
    """Add ``quantity`` more units to an existing cart line.

    The requested quantity is added to what the line already holds, and the
    total is recomputed from the resulting quantity at the product's current
    price.
    """
    item = require_active("cart", {"_id": payload.cart_id, "user_id": payload.user_id}, CART_ITEM_NOT_FOUND)
    product = find_active("product", {"_id": item["product_id"]})
    if not product:
        raise HTTPException(status_code=404, detail="Product not found.")
    price = float(product["price"])
    quantity = item["quantity"] + payload.quantity
    updated = update_active(
        "cart",
        {"_id": item["_id"]},
        {"quantity": quantity, "price": price, "total_amount": line_total(price, quantity)},
    )
    if not updated:
        raise HTTPException(status_code=404, detail=CART_ITEM_NOT_FOUND)
    logger.info("Cart line %s now holds %s", item["_id"], quantity)
    return json_response(SUCCESS, "Cart item updated successfully.", data=serialize_doc(updated))
