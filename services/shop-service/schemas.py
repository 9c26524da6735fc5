"""Pydantic schemas for request/response validation."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional, Union


class ProductCreate(BaseModel):
    """Schema for creating a product."""
    name: str
    image: str
    category: str
    new_price: float
    old_price: float


class ProductRemove(BaseModel):
    """Schema for removing a product."""
    id: int
    name: Optional[str] = None


class ProductResponse(BaseModel):
    """Schema for product response."""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    image: str
    category: str
    new_price: float
    old_price: float
    date: datetime
    available: bool = True


class ProductChangeResponse(BaseModel):
    """Schema for add/remove product response."""
    success: bool
    name: Optional[str] = None


class SignupRequest(BaseModel):
    """Schema for signup request."""
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: str
    password: str


class TokenResponse(BaseModel):
    """Schema for a successful signup or login."""
    success: bool = True
    token: str


class CartItemRequest(BaseModel):
    """Schema for add/remove cart item request."""
    itemId: int


class CartMessageResponse(BaseModel):
    """Schema for cart mutation response."""
    success: bool
    message: str


class UploadResponse(BaseModel):
    """Schema for image upload response."""
    success: Union[int, bool]
    image_url: str


class HealthResponse(BaseModel):
    """Schema for health check response."""
    status: str
    environment: str
