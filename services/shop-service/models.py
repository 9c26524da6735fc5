"""Document models for the shop service.

Each model describes the documents of one MongoDB collection.
"""
from datetime import datetime, timezone
from typing import Dict
from pydantic import BaseModel, Field

from config import CART_SIZE

PRODUCTS = "products"
USERS = "users"
COUNTERS = "counters"

PRODUCT_ID_COUNTER = "product_id"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def empty_cart(size: int = CART_SIZE) -> Dict[str, int]:
    """Cart map with every slot zeroed, keyed by the slot index as a string."""
    return {str(slot): 0 for slot in range(size)}


class Product(BaseModel):
    """Product document."""
    id: int
    name: str
    image: str
    category: str
    new_price: float
    old_price: float
    date: datetime = Field(default_factory=utcnow)
    available: bool = True


class User(BaseModel):
    """User document."""
    name: str
    email: str
    password: str
    cartData: Dict[str, int] = Field(default_factory=empty_cart)
    date: datetime = Field(default_factory=utcnow)
