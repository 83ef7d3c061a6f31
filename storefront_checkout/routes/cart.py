"""Cart API routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.session import UserSession
from ..models.cart import CartView
from ..models.product import Product
from ..services.cart import InvalidQuantityError
from .deps import require_shopper

router = APIRouter(prefix="/api/sessions/{session_id}/cart", tags=["Cart"])


class AddToCartRequest(BaseModel):
    """Request to add a product to the cart"""
    product: Product
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    """Request to set a line quantity; zero or less removes the line"""
    quantity: int


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartView
    message: Optional[str] = None


@router.get("", response_model=CartResponse)
async def get_cart(session: UserSession = Depends(require_shopper)):
    """Get the session cart"""
    return CartResponse(cart=session.cart.to_view())


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    session: UserSession = Depends(require_shopper),
):
    """Add a product to the cart"""
    try:
        session.cart.add_item(request.product, request.quantity)
    except InvalidQuantityError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return CartResponse(cart=session.cart.to_view(), message="Added to cart!")


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    session: UserSession = Depends(require_shopper),
):
    """Update item quantity in cart"""
    if request.quantity > 0 and product_id not in session.cart:
        raise HTTPException(status_code=404, detail="Item not in cart")

    try:
        session.cart.update_quantity(product_id, request.quantity)
    except InvalidQuantityError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return CartResponse(cart=session.cart.to_view(), message="Cart updated")


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    session: UserSession = Depends(require_shopper),
):
    """Remove an item from the cart"""
    session.cart.remove_item(product_id)
    return CartResponse(cart=session.cart.to_view(), message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(session: UserSession = Depends(require_shopper)):
    """Clear all items from cart"""
    session.cart.clear_cart()
    return CartResponse(cart=session.cart.to_view(), message="Cart cleared")
