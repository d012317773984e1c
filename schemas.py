"""
Database Schemas

MongoDB collection schemas for the storefront, defined with Pydantic.
Each model is validated before it is written.

Model name is converted to lowercase for the collection name:
- User -> "user" collection
- Seller -> "seller" collection
- CartItem lines are kept in the "cart" collection

Bookkeeping fields (_id, created_at, updated_at, deleted_at) are added by
database.create_document.
"""

from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List, Literal

OrderStatus = Literal["pending", "shipped", "delivered", "canceled"]

class User(BaseModel):
    email: EmailStr = Field(..., description="Email address, unique among active accounts")
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    password_hash: str = Field(..., description="Salted PBKDF2 hash")

class Seller(BaseModel):
    name: str
    email: EmailStr = Field(..., description="Email address, unique among active sellers")
    phone_number: Optional[str] = None
    password_hash: str = Field(..., description="Salted PBKDF2 hash")
    company_name: str

class Product(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    brand_name: str
    category: str
    images: List[str] = []
    seller_id: Optional[int] = None

class Review(BaseModel):
    user_id: int
    product_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    images: List[str] = []

class CartItem(BaseModel):
    user_id: int
    product_id: int
    product_name: str
    variant: Optional[str] = None
    brand_name: Optional[str] = None
    quantity: int = Field(1, ge=1)
    price: float = Field(..., gt=0)
    total_amount: float

class ProductLine(BaseModel):
    product_name: str
    quantity: int = Field(..., ge=1)

class Order(BaseModel):
    order_number: str
    total_amount: float = Field(..., gt=0)
    user_id: int
    status: OrderStatus = "pending"
    product_details: List[ProductLine]
