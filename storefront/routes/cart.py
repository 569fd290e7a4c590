from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.cart_schemas import CartAddRequest, CartItemRead, CartSummary, CartUpdateRequest
from storefront.services import cart_service
from storefront.utils.token import get_current_user

router = APIRouter()


# Add to Cart

@router.post("/add", response_model=CartItemRead)
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return cart_service.add_to_cart(session, current_user.id, data.product_id, data.quantity)


# View Cart

@router.get("/", response_model=List[CartItemRead])
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return cart_service.get_cart(session, current_user.id)


@router.get("/summary", response_model=CartSummary)
def get_cart_summary(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return cart_service.get_cart_summary(session, current_user.id)


# Update Cart

@router.put("/update/{item_id}", response_model=CartItemRead)
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return cart_service.update_cart_item(session, current_user.id, item_id, data.quantity)


# Remove Cart

@router.delete("/remove/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if not cart_service.remove_from_cart(session, current_user.id, item_id):
        raise HTTPException(404, "Item not found")
    return {"message": "Item removed from cart"}


# Clear Cart

@router.delete("/clear")
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    removed = cart_service.clear_cart(session, current_user.id)
    return {"message": "Cart cleared", "removed": removed}
