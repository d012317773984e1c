import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from database import (
    ACTIVE,
    count_documents,
    create_document,
    get_db,
    get_documents,
    require_active,
    serialize_doc,
    soft_delete,
    update_active,
)
from envelope import SUCCESS, json_response
from schemas import Product, Review

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/product", tags=["product"])

PRODUCT_NOT_FOUND = "Product not found."
REVIEW_NOT_FOUND = "Review not found."


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    brand_name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    images: List[str] = []
    seller_id: Optional[int] = Field(None, ge=1)


class ProductEdit(BaseModel):
    product_id: int = Field(..., ge=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    brand_name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None


class ReviewIn(BaseModel):
    user_id: int = Field(..., ge=1)
    product_id: int = Field(..., ge=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    images: List[str] = []


class ReviewEdit(BaseModel):
    review_id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    images: Optional[List[str]] = None


def rating_summary(product_id: int) -> Dict[str, Any]:
    """Mean rating and count over the active reviews of a product."""
    pipeline = [
        {"$match": {"product_id": product_id, **ACTIVE}},
        {"$group": {"_id": "$product_id", "rating": {"$avg": "$rating"}, "count": {"$sum": 1}}},
    ]
    rows = list(get_db()["review"].aggregate(pipeline))
    if not rows:
        return {"rating": None, "number_of_reviews": 0}
    return {"rating": round(rows[0]["rating"], 2), "number_of_reviews": rows[0]["count"]}


@router.post("/add")
def add_product(payload: ProductIn):
    if payload.seller_id is not None:
        require_active("seller", {"_id": payload.seller_id}, "Seller not found.")
    doc = create_document("product", Product(**payload.model_dump()))
    logger.info("Created product %s", doc["_id"])
    return json_response(SUCCESS, "Product created successfully.", data=serialize_doc(doc))


@router.put("/edit")
def edit_product(payload: ProductEdit):
    changes = payload.model_dump(exclude_none=True, exclude={"product_id"})
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update.")
    updated = update_active("product", {"_id": payload.product_id}, changes)
    if not updated:
        raise HTTPException(status_code=404, detail=PRODUCT_NOT_FOUND)
    logger.info("Updated product %s: %s", payload.product_id, sorted(changes))
    return json_response(SUCCESS, "Product updated successfully.", data=serialize_doc(updated))


@router.delete("/delete")
def delete_product(product_id: int = Query(..., ge=1)):
    deleted = soft_delete("product", {"_id": product_id})
    if not deleted:
        raise HTTPException(status_code=404, detail=PRODUCT_NOT_FOUND)
    logger.info("Soft deleted product %s", product_id)
    return json_response(SUCCESS, "Product soft deleted successfully.", data=serialize_doc(deleted))


@router.get("/all")
def all_products(skip: int = Query(0, ge=0), limit: int = Query(10, ge=1, le=100)):
    items = get_documents("product", skip=skip, limit=limit, sort=[("_id", 1)])
    total = count_documents("product")
    return json_response(
        SUCCESS,
        "Products fetched successfully.",
        data=[serialize_doc(x) for x in items],
        meta={"total": total, "skip": skip, "limit": limit},
    )


@router.get("/details")
def product_details(product_id: int = Query(..., ge=1)):
    product = require_active("product", {"_id": product_id}, PRODUCT_NOT_FOUND)
    data = {**serialize_doc(product), **rating_summary(product_id)}
    return json_response(SUCCESS, "Product details fetched successfully.", data=data)


@router.get("/category")
def products_by_category(category: str = Query(..., min_length=1)):
    items = get_documents("product", {"category": category}, sort=[("_id", 1)])
    if not items:
        raise HTTPException(status_code=404, detail="No products found in this category.")
    return json_response(SUCCESS, "Products fetched successfully.", data=[serialize_doc(x) for x in items])


@router.get("/categories")
def unique_categories():
    categories = sorted(get_db()["product"].distinct("category", ACTIVE))
    return json_response(SUCCESS, "Categories fetched successfully.", data=categories)


# Reviews
@router.post("/review/add")
def add_review(payload: ReviewIn):
    require_active("product", {"_id": payload.product_id}, PRODUCT_NOT_FOUND)
    doc = create_document("review", Review(**payload.model_dump()))
    logger.info("User %s reviewed product %s", payload.user_id, payload.product_id)
    return json_response(SUCCESS, "Review added successfully.", data=serialize_doc(doc))


@router.put("/review/update")
def update_review(payload: ReviewEdit):
    changes = payload.model_dump(exclude_none=True, exclude={"review_id", "user_id"})
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update.")
    updated = update_active("review", {"_id": payload.review_id, "user_id": payload.user_id}, changes)
    if not updated:
        raise HTTPException(status_code=404, detail=REVIEW_NOT_FOUND)
    return json_response(SUCCESS, "Review updated successfully.", data=serialize_doc(updated))


@router.delete("/review/delete")
def delete_review(review_id: int = Query(..., ge=1), user_id: int = Query(..., ge=1)):
    deleted = soft_delete("review", {"_id": review_id, "user_id": user_id})
    if not deleted:
        raise HTTPException(status_code=404, detail=REVIEW_NOT_FOUND)
    logger.info("Soft deleted review %s", review_id)
    return json_response(SUCCESS, "Review deleted successfully.", data=serialize_doc(deleted))


@router.get("/reviews")
def list_reviews(product_id: int = Query(..., ge=1)):
    require_active("product", {"_id": product_id}, PRODUCT_NOT_FOUND)
    reviews = get_documents("review", {"product_id": product_id}, sort=[("_id", -1)])
    return json_response(
        SUCCESS,
        "Reviews fetched successfully.",
        data=[serialize_doc(x) for x in reviews],
        meta=rating_summary(product_id),
    )
