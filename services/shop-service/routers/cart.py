"""Cart API router."""
from typing import Dict
from fastapi import APIRouter, Depends, HTTPException

from auth import verify_token
from dependencies import get_cart_service
from schemas import CartItemRequest, CartMessageResponse
from services.cart_service import CartService

router = APIRouter(tags=["cart"])


@router.post("/addtocart", response_model=CartMessageResponse)
def add_to_cart(
    request: CartItemRequest,
    user_id: str = Depends(verify_token),
    cart_service: CartService = Depends(get_cart_service)
):
    """Add one unit of an item to the cart - requires authentication."""
    try:
        cart_service.add_item(user_id, request.itemId)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": "Added to cart"}


@router.post("/removefromcart", response_model=CartMessageResponse)
def remove_from_cart(
    request: CartItemRequest,
    user_id: str = Depends(verify_token),
    cart_service: CartService = Depends(get_cart_service)
):
    """Remove one unit of an item from the cart - requires authentication."""
    try:
        cart_service.remove_item(user_id, request.itemId)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": "Removed from cart"}


@router.post("/getcart", response_model=Dict[str, int])
def get_cart(
    user_id: str = Depends(verify_token),
    cart_service: CartService = Depends(get_cart_service)
):
    """Get user's cart - requires authentication."""
    return cart_service.get_cart(user_id)
